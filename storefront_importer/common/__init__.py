# Common utilities
from .config_loader import (
    AppConfig,
    load_app_config,
    load_config,
    load_currency_rates,
    load_default_negative_words,
    load_region_currencies,
    load_store_defaults,
)
from .errors import (
    AIServiceError,
    CatalogMutationError,
    ConfigurationError,
    ImporterError,
    InvalidUrlError,
    RemoteFetchError,
    ScrapeError,
    UnresolvableHandleError,
)
from .log_config import setup_logging
from .text_utils import (
    clean_generated_text,
    html_to_text,
    remove_negative_words,
    slugify,
    strip_code_fences,
    strip_surrounding_quotes,
)
