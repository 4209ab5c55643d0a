"""
Client configuration for transmission_py.
"""

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .enums import LogLevel
from .exceptions import ConfigError, TransmissionIOError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def canonical_dir(path: PathLike, what: str = "Directory") -> Path:
    """
    Return the absolute, symlink-free form of an existing directory.

    Raises:
        TransmissionIOError: If the directory does not exist or is a file
    """
    try:
        resolved = Path(path).expanduser().resolve(strict=True)
    except (FileNotFoundError, RuntimeError) as e:
        raise TransmissionIOError(f"{what} {path} does not exist", path=str(path)) from e
    if not resolved.is_dir():
        raise TransmissionIOError(f"{what} {path} is not a directory", path=str(path))
    return resolved


@dataclass(frozen=True)
class ClientConfig:
    """
    Options for a libtransmission session.

    ``app_name``, ``config_dir`` and ``download_dir`` must be set. The config
    directory is where libtransmission keeps ``settings.json``, resume and
    torrent files; values given here override what it loads from there.

    Example:
        config = ClientConfig(app_name="myapp", config_dir="/var/lib/myapp",
                              download_dir="/srv/downloads")
    """
    app_name: Optional[str] = None
    config_dir: Optional[PathLike] = None
    download_dir: Optional[PathLike] = None
    use_utp: bool = True
    log_level: LogLevel = LogLevel.ERROR
    rpc_enabled: bool = False
    rpc_url: Optional[str] = None
    rpc_port: Optional[Union[int, str]] = None
    # Set only on the copy returned by resolve()
    resolved: bool = field(default=False, init=False, compare=False, repr=False)

    def resolve(self) -> "ClientConfig":
        """
        Validate the configuration and return a copy with canonical paths.

        Raises:
            ConfigError: If a required field is missing or a value is invalid
            TransmissionIOError: If a directory does not exist
        """
        if self.resolved:
            return self

        if not self.app_name:
            raise ConfigError("Application name not set")
        if self.config_dir is None:
            raise ConfigError("Configuration directory not set")
        if self.download_dir is None:
            raise ConfigError("Download directory not set")

        try:
            log_level = LogLevel(int(self.log_level))
        except ValueError:
            raise ConfigError(
                f"Log level must be between {LogLevel.NONE.value} and "
                f"{LogLevel.FIREHOSE.value}, got {self.log_level}"
            )

        rpc_port = None
        if self.rpc_port is not None:
            try:
                rpc_port = int(self.rpc_port)
            except (TypeError, ValueError):
                raise ConfigError(f"RPC port must be a number, got {self.rpc_port!r}")
            if not 0 < rpc_port < 65536:
                raise ConfigError(f"RPC port out of range: {rpc_port}")

        config = replace(
            self,
            config_dir=canonical_dir(self.config_dir, "Configuration directory"),
            download_dir=canonical_dir(self.download_dir, "Download directory"),
            log_level=log_level,
            rpc_port=rpc_port,
        )
        object.__setattr__(config, "resolved", True)
        logger.debug("Resolved configuration for %s: config_dir=%s download_dir=%s",
                     config.app_name, config.config_dir, config.download_dir)
        return config

    def to_settings(self) -> Dict[str, Any]:
        """
        The native settings this configuration overrides, keyed by setting name.

        RPC URL and port are only written when RPC is enabled.
        """
        config = self.resolve()
        settings: Dict[str, Any] = {
            "download-dir": str(config.download_dir),
            "utp-enabled": config.use_utp,
            "message-level": int(config.log_level),
            "rpc-enabled": config.rpc_enabled,
        }
        if config.rpc_enabled:
            if config.rpc_url is not None:
                settings["rpc-url"] = config.rpc_url
            if config.rpc_port is not None:
                settings["rpc-port"] = config.rpc_port
        return settings
