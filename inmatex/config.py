"""
Configuration module for Inmate Extract.
"""

import os
from typing import List, Mapping, Optional

import yaml
from pydantic import BaseModel, Field


class SiteConfig(BaseModel):
    """
    Configuration for the inmate search site.
    """

    search_url: str = "http://inmate-search.cobbsheriff.org/enter_name.shtm"  # Search form page
    name_field: str = "inmate_name"  # Name of the form's name input
    mode_field: str = "qry"  # Name of the form's search mode <select>
    default_mode: str = "Inquiry"  # Mode used when the caller gives none
    accepted_modes: List[str] = []  # Allowed modes; empty passes any mode through
    detail_button: str = "Last Known Booking"  # Value of the per-inmate detail button
    max_details: int = 5  # Maximum detail pages visited per search
    reload_results: bool = False  # Re-run the search instead of going back between detail pages


class BrowserConfig(BaseModel):
    """
    Configuration for the page session backend.
    """

    backend: str = "playwright"  # "playwright" or "requests"
    headless: bool = True
    launch_args: List[str] = ["--no-sandbox", "--disable-dev-shm-usage"]
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 Chrome/121 Safari/537.36"
    )
    timeout_ms: int = 60000  # Navigation timeout
    max_retries: int = 3  # Retries per request (requests backend)
    backoff_factor: float = 1.0  # Exponential backoff base in seconds


class ParsingConfig(BaseModel):
    """
    Configuration for the extraction heuristics.
    """

    header_max_cell_length: int = 60  # Longer cells disqualify a header row
    charges_marker: str = "charges"  # Row text that opens the charges section
    release_markers: List[str] = [  # Phrases that close the charges section
        "release information",
        "not released",
    ]
    raw_text_limit: int = 8000  # Characters of detail page text kept as "details"


class ResultsConfig(BaseModel):
    """
    Configuration for the search results table layout.
    """

    first_column: int = 1  # Index of the first data column (column 0 holds the button)
    columns: List[str] = [
        "name",
        "dob",
        "race",
        "sex",
        "location",
        "soid",
        "daysInCustody",
    ]
    soid_pattern: str = r"^\d{9}$"  # Rows whose soid fails this are noise


class ServerConfig(BaseModel):
    """
    Configuration for the HTTP service.
    """

    host: str = "0.0.0.0"
    port: int = 3000
    auth_header: str = "x-api-key"  # Header carrying the shared secret
    auth_token: Optional[str] = None  # Shared secret; None disables the check


class OutputConfig(BaseModel):
    """
    Configuration for output.
    """

    pretty_json: bool = True  # Whether to pretty-print JSON
    include_raw_text: bool = False  # Attach raw detail page text as "details"


class LoggingConfig(BaseModel):
    """
    Configuration for logging.
    """

    level: str = "INFO"  # Logging level (DEBUG/INFO/WARN/ERROR)


class Config(BaseModel):
    """
    Main configuration.
    """

    site: SiteConfig = Field(default_factory=SiteConfig)
    browser: BrowserConfig = Field(default_factory=BrowserConfig)
    parsing: ParsingConfig = Field(default_factory=ParsingConfig)
    results: ResultsConfig = Field(default_factory=ResultsConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def apply_env_overrides(cfg: Config, environ: Optional[Mapping[str, str]] = None) -> Config:
    """
    Apply environment variable overrides to a configuration.

    Args:
        cfg: Configuration object
        environ: Environment mapping (defaults to os.environ)

    Returns:
        The same configuration object
    """
    if environ is None:
        environ = os.environ

    if environ.get("PORT"):
        cfg.server.port = int(environ["PORT"])
    if environ.get("INMATEX_AUTH_TOKEN"):
        cfg.server.auth_token = environ["INMATEX_AUTH_TOKEN"]
    if environ.get("INMATEX_BACKEND"):
        cfg.browser.backend = environ["INMATEX_BACKEND"]

    return cfg


def load_config(path: Optional[str] = None) -> Config:
    """
    Load configuration from a file.

    Args:
        path: Path to the configuration file

    Returns:
        Configuration object
    """
    if path:
        with open(path, "r") as f:
            if path.endswith(".yaml") or path.endswith(".yml"):
                config_dict = yaml.safe_load(f)
            elif path.endswith(".json"):
                import json

                config_dict = json.load(f)
            else:
                raise ValueError(f"Unsupported configuration file format: {path}")

        return Config(**(config_dict or {}))
    else:
        default_locations = [
            "./config.yaml",
            "./config.yml",
            "./config.json",
            os.path.expanduser("~/.config/inmatex/config.yaml"),
        ]

        for loc in default_locations:
            if os.path.exists(loc):
                return load_config(loc)

        return Config()
