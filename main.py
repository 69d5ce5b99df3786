#!/usr/bin/env python3
"""
Offline Image Patcher - Main Entry Point

Applies WSUS-approved updates to a virtual disk image without booting it:
the image is mounted with DISM, every applicable package from the WSUS
content store is added, and the changes are committed or discarded.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from core.exceptions import ConfigurationError, PatchingError
from core.models.config import RunConfig
from core.orchestration.workflow_orchestrator import WorkflowOrchestrator
from core.services.config_service import ConfigService
from core.services.content_resolver import ContentResolver
from core.services.image_servicing_service import ImageServicingService
from core.services.precondition_service import PreconditionService
from core.services.update_query_service import UpdateQueryService
from core.utils.logger import setup_logging
from infrastructure.dism.dism_client import DismClient
from infrastructure.shell.command_runner import CommandRunner
from infrastructure.wsus.wsus_client import WsusClient


def build_orchestrator(config: RunConfig) -> WorkflowOrchestrator:
    """Wire services and infrastructure for a run."""
    runner = CommandRunner()
    wsus_client = WsusClient(
        server=config.server,
        admin_library_path=config.admin_library_path,
        powershell_path=config.powershell_path,
        runner=runner,
    )
    dism_client = DismClient(dism_path=config.dism_path, runner=runner)

    return WorkflowOrchestrator(
        config=config,
        precondition_service=PreconditionService(),
        update_query_service=UpdateQueryService(wsus_client),
        content_resolver=ContentResolver(
            content_root=config.content_root,
            extension=config.package_extension,
            content_segment=config.content_segment,
        ),
        image_servicing_service=ImageServicingService(
            dism_client,
            mount_grace_seconds=config.mount_grace_seconds,
            log_file=config.log_file,
        ),
    )


def arguments_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Map parsed arguments onto configuration keys; unset ones are None."""
    return {
        "image_path": args.image_path,
        "mount_dir": args.mount_dir,
        "content_root": args.content_root,
        "server.host": args.server,
        "server.port": args.port,
        "server.use_ssl": True if args.use_ssl else None,
        "target_group": args.target_group,
        "log_file": args.log_file,
        "confirm": True if args.confirm else None,
        "discard": True if args.discard else None,
        "verbose": True if args.verbose else None,
        "debug": True if args.debug else None,
    }


async def run_patching(config: RunConfig) -> bool:
    """Run the offline patching workflow."""
    logger = logging.getLogger(__name__)
    orchestrator = build_orchestrator(config)

    try:
        result = await orchestrator.run()
    except PatchingError as e:
        logger.critical(f"Offline patching aborted: {e.message}")
        if e.remediation:
            logger.info(e.remediation)
        return False
    except Exception as e:
        logger.critical(f"Offline patching aborted by unexpected error: {e}")
        # Traceback goes to the log file only
        logger.debug("Unexpected error details", exc_info=True)
        return False

    logger.info(f"Run ID: {result.run_id}")
    logger.info(f"Duration: {result.duration}")
    return True


def parse_arguments(argv: Optional[list] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='Offline Image Patcher - apply approved WSUS updates to a disk image',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Patch an image with every approved update
  python main.py --image-path D:\\VMs\\base.vhdx --mount-dir D:\\Mount \\
      --server wsus01 --content-root D:\\WSUS\\WsusContent

  # Restrict to one target group and ask before installing
  python main.py --image-path base.vhdx --mount-dir D:\\Mount --server wsus01 \\
      --content-root D:\\WSUS\\WsusContent --target-group "Server Images" --confirm

  # Dry pass: apply, then throw the changes away
  python main.py --config config/default.yml --discard --verbose
        """
    )

    # Required values (may also come from the configuration file)
    parser.add_argument('--image-path', help='Path to the virtual disk image')
    parser.add_argument('--mount-dir', help='Directory to mount the image into')
    parser.add_argument('--server', help='WSUS server name')
    parser.add_argument('--content-root', help='Local path of the WSUS content store')

    # Update server options
    parser.add_argument(
        '--port',
        type=int,
        help='WSUS server port (default: 8530)'
    )
    parser.add_argument(
        '--use-ssl',
        action='store_true',
        help='Connect to WSUS over SSL'
    )
    parser.add_argument(
        '--target-group',
        help='Only apply updates approved for this computer target group'
    )

    # Run options
    parser.add_argument(
        '--config',
        help='Path to configuration file (default: config/default.yml if present)'
    )
    parser.add_argument(
        '--log-file',
        help='Log file, truncated at start (default: offline_patch.log)'
    )
    parser.add_argument(
        '--confirm',
        action='store_true',
        help='Ask before installing updates'
    )
    parser.add_argument(
        '--discard',
        action='store_true',
        help='Discard changes instead of committing them'
    )

    # Output options
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose logging'
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug logging'
    )

    return parser.parse_args(argv)


def main(argv: Optional[list] = None) -> int:
    """Main entry point."""
    args = parse_arguments(argv)

    try:
        config_service = ConfigService()
        config_service.load_file(args.config)
        config = config_service.build_run_config(arguments_to_overrides(args))
    except ConfigurationError as e:
        print(f"Configuration error: {e.message}", file=sys.stderr)
        return 1

    try:
        setup_logging(config.log_file, config.log_level.value)
    except OSError as e:
        print(f"Cannot open log file {config.log_file}: {e}", file=sys.stderr)
        return 1

    try:
        success = asyncio.run(run_patching(config))
        return 0 if success else 1

    except KeyboardInterrupt:
        print("\nOperation cancelled by user")
        return 1


if __name__ == '__main__':
    sys.exit(main())
