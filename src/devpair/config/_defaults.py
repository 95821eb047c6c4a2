"""Built-in defaults, the bottom configuration layer.

A plain dict so it can be layered with ``deep_merge``, which copies it.
"""

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {  # pyright: ignore[reportExplicitAny]
    "frontend": {
        "path": "",
        "framework": "react-vite",
        "custom_command": "",
    },
    "backend": {
        "path": "",
        "framework": "express",
        "custom_command": "",
    },
    "active_profile": "dev",
    "profiles": {
        "dev": {"frontend": "", "backend": ""},
        "prod": {"frontend": "", "backend": ""},
        "test": {"frontend": "", "backend": ""},
    },
    "use_docker": False,
    "auto_restart": False,
    "logging": {
        "level": "info",
        "format": "text",
        "file": "",
    },
    "supervisor": {
        "restart_limit": 3,
        "restart_backoff_step": 2.0,
        "error_prompt_delay": 5.0,
        "launch_delay": 0.5,
        "launch_stagger": 0.5,
        "shutdown_timeout": 5.0,
    },
    "health": {
        "host": "localhost",
        "interval": 5.0,
        "timeout": 2.0,
    },
}
