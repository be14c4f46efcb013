#!/usr/bin/env python3
"""
Kotlin Bindings Generator

Parses a UDL component interface definition and generates the Kotlin
bindings for it as a single source file under the output directory.

Usage:
    python generate_bindings.py geo.udl --out-dir build/
    python generate_bindings.py geo.udl --out-dir build/ --config uniffi.toml
    python generate_bindings.py geo.udl --out-dir build/ --package-name com.example.geo
"""

import argparse
import sys
import time
from pathlib import Path

# Add parent directory to path so ktbindgen package can be found
sys.path.insert(0, str(Path(__file__).parent.parent))

from ktbindgen import (
    BindgenError,
    Config,
    UDLParser,
    load_config,
    write_bindings,
)
from ktbindgen.logging import configure_logging


def main(argv=None):
    start_time = time.perf_counter()

    parser = argparse.ArgumentParser(description="Generate Kotlin bindings from UDL")
    parser.add_argument("udl_file", help="Path to UDL file")
    parser.add_argument("--out-dir", "-o", default="generated", help="Output directory")
    parser.add_argument("--config", "-c", default="", help="TOML config file (default: uniffi.toml beside the UDL file)")
    parser.add_argument("--package-name", default=None, help="Kotlin package name")
    parser.add_argument("--cdylib-name", default=None, help="Native library name to load")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-file", default=None, help="Also write logs to this file")
    args = parser.parse_args(argv)

    logger = configure_logging(
        verbose=args.verbose,
        log_file=Path(args.log_file) if args.log_file else None,
    )

    udl_path = Path(args.udl_file)
    config_path = Path(args.config) if args.config else udl_path.parent / "uniffi.toml"

    try:
        ci = UDLParser(udl_path.read_text(encoding="utf-8")).parse()
        # Command line wins over the config file, which wins over derived defaults
        overrides = Config(package_name=args.package_name, cdylib_name=args.cdylib_name)
        config = overrides.merge_with(load_config(config_path))
        path = write_bindings(ci, config, Path(args.out_dir))
    except (BindgenError, OSError) as e:
        logger.error("%s", e)
        return 1

    print(f"Generated: {path}")

    elapsed = time.perf_counter() - start_time
    print(f"Generation completed in {elapsed*1000:.2f} ms")
    return 0


if __name__ == "__main__":
    sys.exit(main())
