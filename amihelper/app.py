import argparse
import sys
from typing import List, Optional

from .env import LOG_LEVELS, Settings, check_aws_credentials, load_env

from . import __version__
from .candidates import Architecture, Family
from .errors import AmiHelperError, CredentialsMissing
from .logger import get_logger
from .report import render_amis, render_smoke_test, render_table
from .selection import SelectOptions, select
from .sources import source_for


def options_from_args(args: argparse.Namespace, settings: Settings) -> SelectOptions:
    return SelectOptions(
        family=Family.from_option(args.operating_system),
        architecture=Architecture(args.architecture or "all"),
        singleton=args.singleton,
        just_ami=args.just_ami,
        smoke_test=args.smoke_test,
        region=args.region or settings.region,
        snapshot=args.snapshot,
    )


def cmd_select(args: argparse.Namespace, settings: Settings) -> int:
    options = options_from_args(args, settings)
    if options.snapshot is None:
        problems = check_aws_credentials()
        if problems:
            raise CredentialsMissing(problems)

    source = source_for(options.snapshot, options.region)
    details = select(options, source)

    if options.smoke_test:
        sys.stdout.write(render_smoke_test(details[0], options.architecture))
    elif options.just_ami:
        sys.stdout.write(render_amis(details))
    else:
        sys.stdout.write(render_table(details))

    get_logger().log_metrics_summary()
    return 0


def cmd_version(args: argparse.Namespace, settings: Settings) -> int:
    print(__version__)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ami-helper", description="Pick general purpose AMIs published in AWS Systems Manager")
    parser.add_argument("--version", action="store_true", help="Show version")

    subparsers = parser.add_subparsers(dest="command")
    sel = subparsers.add_parser("select", help="Select the AMIs that are reasonable general purpose choices and match the conditions")
    sel.add_argument("-a", "--architecture", choices=[a.value for a in Architecture], help="Only list AMIs for the selected architecture (default: all)")
    sel.add_argument("-o", "--operating-system", default="all", choices=["all", "amazon", "debian", "ubuntu"], help="Only list AMIs for the selected operating system (default: all)")
    sel.add_argument("-r", "--region", help="Use this AWS region (default: AMI_HELPER_REGION or us-east-2)")
    sel.add_argument("-1", "--singleton", action="store_true", help="Exit with an error if more than one AMI is selected")
    output = sel.add_mutually_exclusive_group()
    output.add_argument("-j", "--just-ami", action="store_true", help="Output just the selected AMIs")
    output.add_argument("-s", "--smoke-test", action="store_true", help="Output arguments used in the smoke tests. Implies --singleton and requires --architecture")
    sel.add_argument("--snapshot", help="Read parameters from a saved get-parameters-by-path JSON file or URL instead of AWS")
    sel.add_argument("--log-level", type=str.upper, choices=LOG_LEVELS, help="Log level for stderr (default: AMI_HELPER_LOG_LEVEL or WARNING)")
    sel.set_defaults(func=cmd_select)

    ver = subparsers.add_parser("version", help="Show version information for this program")
    ver.set_defaults(func=cmd_version)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    # Load .env if present (AWS credentials, AMI_HELPER_* settings)
    load_env()
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return 0

    if not hasattr(args, "func"):
        parser.print_help(sys.stderr)
        return 0

    if args.command == "select" and args.smoke_test and args.architecture in (None, "all"):
        parser.error("--smoke-test requires --architecture amd64 or arm64")

    try:
        settings = Settings.from_env()
    except AmiHelperError as e:
        print(e, file=sys.stderr)
        return 1

    log_level = getattr(args, "log_level", None) or settings.log_level
    get_logger().configure(log_level, log_dir=settings.log_dir, enable_file=settings.log_dir is not None)

    try:
        return args.func(args, settings)
    except AmiHelperError as e:
        print(e, file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
