from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, mapping of arguments to
builder options, build execution and result rendering. Fatal build errors
are reported here and turned into exit codes.
"""

import json
import os
import sys
from dataclasses import asdict
from typing import List, Optional

from resolution_map_builder.core.pipeline.engine import ResolutionMapBuilder
from resolution_map_builder.domain.errors import ResolutionMapError
from resolution_map_builder.domain.resolution_models import BuildResult
from resolution_map_builder.infra.logging import LoggingConfig, configure_logging, get_logger
from resolution_map_builder.interface.cli import args as cli_args

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_BUILD_FAILED = 1
EXIT_BAD_INPUT = 2
EXIT_INTERRUPTED = 130

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code.
    """
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    configure_logging(LoggingConfig.for_cli(args.debug, args.log_file))

    if not os.path.isdir(args.src_path):
        msg = f"Source directory does not exist: {args.src_path}"
        logger.error(msg)
        print(f"ERROR: {msg}", file=sys.stderr)
        return EXIT_BAD_INPUT

    try:
        options = cli_args.args_to_options(args)
        builder = ResolutionMapBuilder(args.src_path, args.config_root, options)

        if args.dump_config:
            print(json.dumps(builder.load_grammar().to_dict(), ensure_ascii=False, indent=2))
            return EXIT_OK

        result = builder.build(args.output_path)
    except KeyboardInterrupt:
        logger.warning("Build interrupted.")
        return EXIT_INTERRUPTED
    except ResolutionMapError as e:
        logger.error(f"Build failed: {e}")
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_BUILD_FAILED

    if args.json_output:
        print(json.dumps(asdict(result), ensure_ascii=False, indent=2))
    else:
        _print_human_summary(result)

    return EXIT_OK

# -----------------------------------------------------------------------------
# VIEW RENDERING (HUMAN READABLE)
# -----------------------------------------------------------------------------

def _print_human_summary(result: BuildResult) -> None:
    print(f"Module map generated for {result.scan_root}")
    print(f"Specifiers resolved: {len(result.mapping)}")
    for kind, path in result.generated_files.items():
        print(f"  - {kind}: {path}")
    if result.unresolved_collections:
        print(f"Unresolvable collections walked: {', '.join(result.unresolved_collections)}")
    if result.specifiers is not None:
        for specifier in sorted(result.specifiers):
            print(f"    {specifier}")


if __name__ == "__main__":
    sys.exit(main())
