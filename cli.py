"""
LiteJSON CLI.

Commands:
- litejson init       : write a config file, create directories and sample data
- litejson hash       : print a bcrypt hash for the config file
- litejson validate   : load and validate the config file
- litejson serve      : run the HTTP server
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from auth_manager import hash_password
from json_store import atomic_write_json
from persistence.paths import ensure_dir
from settings import DEFAULT_CONFIG_PATH, ConfigError, LiteJsonConfig, get_settings, load_config

logger = logging.getLogger("litejson.cli")

SAMPLE_DOCUMENT = {
    "title": "About Us",
    "description": "This is a sample about page",
    "version": "1.0.0",
}

SAMPLE_SCHEMA = {
    "type": "object",
    "properties": {
        "title": {"type": "string"},
        "description": {"type": "string"},
        "version": {"type": "string"},
    },
    "required": ["title", "description"],
}


def main(argv: Optional[list] = None) -> int:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        prog="litejson",
        description="LiteJSON: JSON file backend for static sites",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    init_parser = subparsers.add_parser("init", help="Initialize a new LiteJSON project")
    init_parser.add_argument("--config", default=settings.config_path, help="Config file to write")
    init_parser.add_argument("--username", default="admin", help="Admin username (default: admin)")
    init_parser.add_argument("--password", default="admin123", help="Admin password (default: admin123)")
    init_parser.add_argument("--port", type=int, default=3000, help="Server port (default: 3000)")
    init_parser.add_argument("--data-dir", default="./data", help="Data directory (default: ./data)")
    init_parser.add_argument("--schemas-dir", default="./schemas", help="Schemas directory (default: ./schemas)")

    hash_parser = subparsers.add_parser("hash", help="Hash a password for the config file")
    hash_parser.add_argument("password", help="Password to hash")

    validate_parser = subparsers.add_parser("validate", help="Validate configuration")
    validate_parser.add_argument("--config", default=settings.config_path, help="Config file to check")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP server")
    serve_parser.add_argument("--config", default=settings.config_path, help="Config file to load")
    serve_parser.add_argument("--host", default=settings.host, help=f"Bind address (default: {settings.host})")
    serve_parser.add_argument("--port", type=int, default=None, help="Override the configured port")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 0

    commands = {
        "init": cmd_init,
        "hash": cmd_hash,
        "validate": cmd_validate,
        "serve": cmd_serve,
    }
    return commands[args.command](args)


def cmd_init(args: argparse.Namespace) -> int:
    """Write the config (unless present), then create directories and sample files."""
    config_path = Path(args.config or DEFAULT_CONFIG_PATH)

    if config_path.exists():
        print(f"Config file already exists: {config_path}. Skipping config creation.")
    else:
        config = LiteJsonConfig.model_validate(
            {
                "dataDir": args.data_dir,
                "schemasDir": args.schemas_dir,
                "port": args.port,
                "admin": {"username": args.username, "passwordHash": hash_password(args.password)},
                "permissions": {"about": "public", "menu": "admin"},
            }
        )
        atomic_write_json(config_path, config.to_disk_doc())
        print(f"Created {config_path}")

    data_dir = Path(args.data_dir)
    schemas_dir = Path(args.schemas_dir)
    for path in (data_dir, schemas_dir, data_dir.parent / ".history"):
        if not path.exists():
            ensure_dir(path)
            print(f"Created directory: {path}")

    sample_doc = data_dir / "about.json"
    if not sample_doc.exists():
        atomic_write_json(sample_doc, SAMPLE_DOCUMENT)
        print("Created sample data file: about.json")

    sample_schema = schemas_dir / "about.json"
    if not sample_schema.exists():
        atomic_write_json(sample_schema, SAMPLE_SCHEMA)
        print("Created sample schema file: about.json")

    print(f"Admin username: {args.username}")
    print("Start the server with: litejson serve")
    return 0


def cmd_hash(args: argparse.Namespace) -> int:
    print(f"Password hash: {hash_password(args.password)}")
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1
    print("Configuration is valid")
    print(f"Data directory: {config.data_dir}")
    print(f"Schemas directory: {config.schemas_dir}")
    print(f"Port: {config.port}")
    print(f"Admin user: {config.admin.username}")
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    from app import create_app

    try:
        config = load_config(args.config)
    except ConfigError as e:
        logger.error("Failed to load configuration: %s", e)
        return 1

    app = create_app(config)
    uvicorn.run(app, host=args.host, port=args.port or config.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
