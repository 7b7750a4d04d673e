"""
Deployment descriptor for running OpinionPointer in production.

Mirrors what the host process manager needs to know about the service:
- Process count and bind address for uvicorn workers
- Memory / restart limits, enforced by the external supervisor that reads
  the manifest printed by ``python -m app.serve --manifest``
- Log file locations
- Graceful shutdown and startup timeouts

Every value can be overridden with a ``DEPLOY_`` prefixed environment variable.
"""
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.core.logging import LOG_FORMAT


class DeploymentSettings(BaseSettings):
    """Process manager configuration."""

    model_config = SettingsConfigDict(env_prefix="DEPLOY_", env_file=".env", extra="ignore")

    name: str = Field(default="opinionpointer")
    app: str = Field(default="app.main:app")
    cwd: str = Field(default="/var/www/opinionpointer")
    environment: str = Field(default="production")

    # Processes (4 workers on a 6 CPU host, 2 left for the system and nginx)
    instances: int = Field(default=4, ge=1)
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3001)

    # Auto-restart
    autorestart: bool = Field(default=True)
    watch: bool = Field(default=False)
    max_memory_restart_mb: int = Field(default=1024, gt=0)
    min_uptime_seconds: int = Field(default=10, ge=0)
    max_restarts: int = Field(default=10, ge=0)

    # Logging
    error_file: str = Field(default="/var/log/opinionpointer/opinionpointer-error.log")
    out_file: str = Field(default="/var/log/opinionpointer/opinionpointer-out.log")
    log_date_format: str = Field(default="%Y-%m-%d %H:%M:%S %z")
    merge_logs: bool = Field(default=True)

    # Graceful shutdown
    kill_timeout_ms: int = Field(default=5000, ge=0)
    listen_timeout_ms: int = Field(default=3000, ge=0)

    def logging_config(self) -> dict[str, Any]:
        """
        Build a ``logging.config.dictConfig`` mapping.

        INFO and above go to ``out_file``; ERROR and above additionally go
        to ``error_file``.
        """
        return {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": LOG_FORMAT,
                    "datefmt": self.log_date_format,
                },
            },
            "handlers": {
                "out_file": {
                    "class": "logging.handlers.WatchedFileHandler",
                    "filename": self.out_file,
                    "formatter": "default",
                    "level": "INFO",
                },
                "error_file": {
                    "class": "logging.handlers.WatchedFileHandler",
                    "filename": self.error_file,
                    "formatter": "default",
                    "level": "ERROR",
                },
            },
            "root": {
                "handlers": ["out_file", "error_file"],
                "level": "INFO",
            },
            "loggers": {
                "uvicorn": {"level": "INFO"},
                "uvicorn.error": {"level": "INFO"},
                "uvicorn.access": {"level": "INFO"},
            },
        }

    def uvicorn_options(self) -> dict[str, Any]:
        """Keyword arguments for ``uvicorn.run``."""
        return {
            "host": self.host,
            "port": self.port,
            "workers": self.instances,
            "reload": self.watch,
            "timeout_graceful_shutdown": self.kill_timeout_ms // 1000,
            "log_config": self.logging_config(),
        }

    def process_manifest(self) -> dict[str, Any]:
        """Restart policy for the supervising process manager."""
        return {
            "name": self.name,
            "cwd": self.cwd,
            "instances": self.instances,
            "env": {"ENVIRONMENT": self.environment, "PORT": str(self.port)},
            "autorestart": self.autorestart,
            "watch": self.watch,
            "max_memory_restart": f"{self.max_memory_restart_mb}M",
            "min_uptime": f"{self.min_uptime_seconds}s",
            "max_restarts": self.max_restarts,
            "kill_timeout": self.kill_timeout_ms,
            "listen_timeout": self.listen_timeout_ms,
            "error_file": self.error_file,
            "out_file": self.out_file,
            "log_date_format": self.log_date_format,
            "merge_logs": self.merge_logs,
        }


def get_deployment_settings() -> DeploymentSettings:
    """Load the deployment descriptor from the environment."""
    return DeploymentSettings()
