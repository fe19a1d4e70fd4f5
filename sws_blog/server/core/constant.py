"""Server-wide constants that are not deployment settings."""

PROJECT_NAME = "sws-blog"
API_V1_STR = "/api/v1"
ADMIN_PREFIX = f"{API_V1_STR}/admin"

# Retired URLs that answer 410 Gone
GONE_URL_PATTERNS = [
    # Location-based mobile app development pages
    r"^/mobile-app-development(/.*)?$",
    # Old blog posts
    r"^/blog/why-your-business-needs-to-switch-from-wordpress-to-svelteKit-for-a-competitive-edge$",
    r"^/blog/passion-and-experience-versus-price-when-hiring-a-software-developer$",
    # Old article categories
    r"^/articles/(business-efficiency|customer-engagement|user-engagement|seo)$",
    # Old service/topic pages
    r"^/app-development-costs/.*",
    r"^/website-optimisation/.*",
    r"^/bespoke-mobile-apps/.*",
    r"^/legal-tech/.*",
    r"^/services/mobile-application-development$",
]

ADMIN_NOTIFICATIONS_CHANNEL = "admin-chat-notifications"
ORIGINAL_FAVICON = "/favicon.png"
ALERT_FAVICON = "/favicon-alert.svg"
