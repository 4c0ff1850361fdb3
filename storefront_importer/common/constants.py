"""
Shared constants for the project.

This module contains application-wide constants that should have a single source of truth.
"""

# Storefront JSON page size ceiling (Shopify caps limit= at 250)
STOREFRONT_PAGE_SIZE = 250

# Value of one unit of each currency in USD.
# Static snapshot; conversion goes source -> USD -> target.
CURRENCY_TO_USD = {
    "USD": 1.0,
    "EUR": 1.08,
    "GBP": 1.27,
    "CAD": 0.74,
    "AUD": 0.66,
    "NZD": 0.61,
    "JPY": 0.0067,
    "CNY": 0.14,
    "INR": 0.012,
    "CHF": 1.13,
    "SEK": 0.095,
    "NOK": 0.094,
    "DKK": 0.145,
    "PLN": 0.25,
    "BGN": 0.552,
    "TRY": 0.031,
    "BRL": 0.2,
    "MXN": 0.058,
    "KRW": 0.00075,
    "AED": 0.272,
    "SAR": 0.267,
    "SGD": 0.74,
    "HKD": 0.128,
}

# Known region names (lowercase) -> ISO currency code. Anything else is USD.
REGION_CURRENCIES = {
    "united states": "USD",
    "us": "USD",
    "usa": "USD",
    "united kingdom": "GBP",
    "uk": "GBP",
    "great britain": "GBP",
    "europe": "EUR",
    "eu": "EUR",
    "european union": "EUR",
    "germany": "EUR",
    "france": "EUR",
    "spain": "EUR",
    "italy": "EUR",
    "netherlands": "EUR",
    "canada": "CAD",
    "australia": "AUD",
    "new zealand": "NZD",
    "japan": "JPY",
    "china": "CNY",
    "india": "INR",
    "switzerland": "CHF",
    "sweden": "SEK",
    "norway": "NOK",
    "denmark": "DKK",
    "poland": "PLN",
    "turkey": "TRY",
    "brazil": "BRL",
    "mexico": "MXN",
    "south korea": "KRW",
    "korea": "KRW",
    "united arab emirates": "AED",
    "uae": "AED",
    "saudi arabia": "SAR",
    "singapore": "SGD",
    "hong kong": "HKD",
}

DEFAULT_CURRENCY = "USD"

# Rounding presets offered in settings; any other fraction in [0, 1) is accepted too
PRICE_ROUNDING_OPTIONS = [".99", ".95", ".00", ".90", ".49", ".50"]

# Scraped weight units -> Shopify WeightUnit enum
WEIGHT_UNITS = {
    "kg": "KILOGRAMS",
    "g": "GRAMS",
    "lb": "POUNDS",
    "oz": "OUNCES",
    "kilograms": "KILOGRAMS",
    "grams": "GRAMS",
    "pounds": "POUNDS",
    "ounces": "OUNCES",
}
DEFAULT_WEIGHT_UNIT = "KILOGRAMS"

DEFAULT_NEGATIVE_WORDS = [
    "Shipping",
    "Payment",
    "Warranty",
    "Dropshipping",
    "China",
    "Hongkong",
    "Free",
    "Customer service",
    "Return",
    "Contact",
]

LANGUAGE_OPTIONS = [
    "English",
    "Spanish",
    "French",
    "German",
    "Italian",
    "Portuguese",
    "Dutch",
    "Japanese",
    "Korean",
    "Chinese",
    "Arabic",
    "Turkish",
]
