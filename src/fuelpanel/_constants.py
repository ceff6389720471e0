"""Internal constants shared across the library."""

BASE_URL = "https://fuelprices.example.com"
PRICES_ENDPOINT = "/api/prices"
USER_AGENT = "pyfuelpanel"

# Calendar dates travel as ISO-8601 strings in keys, requests and the URL.
DATE_FORMAT = "%Y-%m-%d"
DATE_LABEL_FORMAT = "%a %d %b %Y"
DETECTION_FORMAT = "%Y-%m-%d %H:%M:%S"

CURRENCY_SUFFIX = "kr"
UNKNOWN_PRICE = "??.??"
CHANGED_TITLE = "Price has changed"
ERROR_NOTICE = "An error has occurred"

# URL query parameters.
NOW_PARAM = "now"
TYPE_PARAM = "type"
BG_COLOR_PARAM = "bgColor"
TEXT_COLOR_PARAM = "textColor"
