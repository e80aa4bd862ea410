"""Application-wide constants for xlsx-sender."""

from __future__ import annotations

from typing import Final


class Application:
    """Application identity constants."""

    NAME = "xlsx-sender"
    VERSION = "0.1.0"
    HOME_DIR = ".xlsx-sender"


class StatusFile:
    """Status sidecar constants."""

    FILENAME = "xlsx-sender-status.json"
    ENCODING = "utf-8"
    INDENT = 2
    KEY_SEPARATOR = "|"


class Workbook:
    """Spreadsheet discovery and metadata constants."""

    TARGET_EXTENSION = ".xlsx"
    CORE_PROPERTIES_PATH = "docProps/core.xml"
    LAST_MODIFIED_BY_PATTERN = r"<cp:lastModifiedBy>([^<]*)</cp:lastModifiedBy>"


class Logging:
    """Logging defaults."""

    DEFAULT_LEVEL = "INFO"
    DEFAULT_FILE_PATH = "logs/xlsx-sender.log"
    DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
    MAX_BYTES = 10 * 1024 * 1024
    BACKUP_COUNT = 5


class FolderPurpose:
    """Purpose labels used when prompting for folders."""

    SOURCE = "source"
    DESTINATION = "destination"


class PermissionMode:
    """Permission modes understood by folder handles."""

    READ = "read"
    READ_WRITE = "readwrite"


class CLICommands:
    """CLI command names."""

    SCAN = "scan"
    SEND = "send"
    DISCARD = "discard"
    STATUS = "status"


class CLIDefaults:
    """CLI exit codes and defaults."""

    EXIT_SUCCESS: Final = 0
    EXIT_ERROR: Final = 1
    EXIT_STATUS_NOT_PERSISTED: Final = 2
    VERSION = Application.VERSION


class CLIHelp:
    """CLI help texts."""

    APP_NAME = Application.NAME
    APP_DESCRIPTION = (
        "xlsx-sender - send pending spreadsheets from a source folder "
        "to a destination folder and remember what was handled."
    )
    APP_STYLE = "rich"
    VERSION_TEXT = "xlsx-sender v{version}"

    SOURCE_HELP = "Source folder to scan (prompted when omitted)"
    DESTINATION_HELP = "Destination folder to copy into (prompted when omitted)"
    FILE_HELP = "Name of a listed file to select (repeatable)"
    ALL_HELP = "Select every pending file"
    YES_HELP = "Do not ask for confirmation"
