"""Command-line entry point"""

import argparse
import asyncio
import json
import logging
import signal
import sys

from linkedin_autoapply.ai.backend_client import BackendConfig, BackendTextGenerator
from linkedin_autoapply.bot import LinkedInBot
from linkedin_autoapply.config import BotConfig
from linkedin_autoapply.models import ResumeData
from linkedin_autoapply.utils.logging import setup_logging

log = logging.getLogger(__name__)

SPEED_PROFILES = {"dev": "dev_test", "super": "super_dev"}


def load_json(path):
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def build_parser():
    parser = argparse.ArgumentParser(
        description="LinkedIn Easy Apply automation - searches postings and applies unattended",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment:
  AUTOAPPLY_API_URL     Text-generation backend endpoint
  AUTOAPPLY_API_TOKEN   Backend token
  AUTOAPPLY_MODEL       Model name (default gpt-4o-mini)

Speed Modes:
  --speed dev       40-50%% faster - balanced testing
  --speed super     70-80%% faster - maximum safe speed
  (default)         Production speed - safest, most human-like

Examples:
  linkedin-autoapply --config search.json --resume resume.json
  linkedin-autoapply --config search.json --resume resume.json --dry-run
        """,
    )
    parser.add_argument("--config", required=True, help="JSON file with search, blacklist and settings")
    parser.add_argument("--resume", required=True, help="JSON file with structured resume data")
    parser.add_argument("--resume-file", help="Resume PDF to upload (overrides settings.resume_path)")
    parser.add_argument("--dry-run", action="store_true", help="Fill every step but never submit")
    parser.add_argument("--headless", action="store_true", help="Run the browser headless")
    parser.add_argument("--speed", choices=sorted(SPEED_PROFILES), help="Speed mode: dev or super")
    parser.add_argument("--log-dir", help="Also write logs to this directory")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def load_config(args):
    config = BotConfig.from_dict(load_json(args.config))
    settings = config.settings
    if args.dry_run:
        settings.dry_run = True
    if args.headless:
        settings.headless = True
    if args.resume_file:
        settings.resume_path = args.resume_file
    if args.speed:
        settings.timing_mode = SPEED_PROFILES[args.speed]
    return config


async def run(bot):
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, bot.stop)
        except NotImplementedError:
            # Windows event loops have no signal handlers; Ctrl+C cancels the run instead
            pass
    return await bot.start()


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(verbose=args.verbose, log_dir=args.log_dir)

    try:
        config = load_config(args)
        resume = ResumeData.from_dict(load_json(args.resume))
        generator = BackendTextGenerator(BackendConfig.from_env())
        bot = LinkedInBot()
        bot.initialize(config, resume, generator)
    except (OSError, ValueError, RuntimeError) as e:
        log.error("%s", e)
        return 2

    summary = asyncio.run(run(bot))
    log.info("Summary: %s", summary.stats)
    if summary.fatal_reason:
        log.error("Run ended early: %s", summary.fatal_reason)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
