from checkthesite.configuration.files import FileService
from checkthesite.configuration.models import (
    DEFAULT_CONFIGURATION,
    Configuration,
    MailData,
    RequestData,
)
from checkthesite.configuration.service import (
    CONFIG_FILE_NAME,
    ConfigError,
    ConfigGenerated,
    ConfigurationService,
    LoadedConfiguration,
    build_policy,
    validate_configuration,
)

__all__ = [
    "CONFIG_FILE_NAME",
    "ConfigError",
    "ConfigGenerated",
    "Configuration",
    "ConfigurationService",
    "DEFAULT_CONFIGURATION",
    "FileService",
    "LoadedConfiguration",
    "MailData",
    "RequestData",
    "build_policy",
    "validate_configuration",
]
