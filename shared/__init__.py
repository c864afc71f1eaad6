"""
Shared module for common utilities used by the catalog API and the CLI.

STRUCTURE:
- shared.config: Configuration
  - settings.py: Environment config (Pydantic)
  - logging.py: Structured logging

- shared.security: Secret handling
  - secrets.py: Constant-time secret comparison

- shared.utils: Utilities
  - exceptions.py: Domain errors and HTTP exceptions with auto-logging
  - text.py: Slug and Notion id normalization

IMPORT EXAMPLES:
    from shared.config.settings import settings
    from shared.config.logging import get_logger
    from shared.security.secrets import safe_compare_secret
    from shared.utils.exceptions import CompanyNotFoundError, InvalidKeyError
"""
