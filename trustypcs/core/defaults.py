"""Default site settings."""

from datetime import date
from typing import Dict, Optional

SEO_DEFAULTS = {
    "primary_tagline": "Military PCS Marketplace — Buy, Sell & Connect with Verified DoD Families",
    "secondary_tagline": "The Trusted Marketplace for Military PCS Moves",
    "homepage_meta_description": (
        "TrustyPCS is the secure marketplace built for military members and DoD families. "
        "Buy, sell, and connect with verified users during your PCS relocation."
    ),
    "base_page_title_template": "{{base_name}} Military PCS Marketplace | Buy & Sell Locally | TrustyPCS",
    "base_page_description_template": (
        "Buy and sell locally at {{base_name}}. TrustyPCS connects verified DoD families "
        "for safe PCS relocation sales near {{base_name}}."
    ),
    "primary_keywords": (
        "military PCS marketplace, PCS relocation sales, military base classifieds, "
        "military yard sale online, military moving sale, DoD family marketplace"
    ),
    "local_keywords": (
        "military classifieds, Fort Liberty PCS sales, Fayetteville military marketplace, "
        "San Antonio PCS, Ramstein Air Base classifieds"
    ),
    "trust_keywords": (
        "DoD verified marketplace, secure military marketplace, trusted PCS sales, "
        "verified military families only, family-friendly PCS community"
    ),
}


def default_settings(today: Optional[date] = None) -> Dict[str, str]:
    """Site settings used when nothing has been configured yet."""
    year = (today or date.today()).year
    defaults = {
        "website_name": "TrustyPCS",
        "website_description": "Military PCS Marketplace - Buy, Sell & Connect with DoD Families",
        "website_logo_url": "",
        "favicon_url": "",
        "support_email": "support@trustypcs.com",
        "admin_email": "admin@trustypcs.com",
        "mailing_address": "123 Military Lane, Fort Base, ST 12345",
        "phone_number": "+1 (555) PCS-SELL",
        "facebook_url": "",
        "twitter_url": "",
        "instagram_url": "",
        "footer_copyright": f"© {year} TrustyPCS. All rights reserved.",
        "footer_show_links": "true",
    }
    defaults.update(SEO_DEFAULTS)
    return defaults
