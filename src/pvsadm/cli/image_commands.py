"""``pvsadm image import`` and ``pvsadm image list`` handlers.

No business logic lives here: options are packed into core models and
handed to the services built by :class:`~pvsadm.cli.context.CloudContext`.
"""

from __future__ import annotations

import argparse
from collections.abc import Callable

from rich.markup import escape

from pvsadm.cli import exit_codes
from pvsadm.cli.console import console, output
from pvsadm.cli.context import CloudContext
from pvsadm.cli.tables import build_image_table
from pvsadm.core.models import ImportOptions
from pvsadm.core.validation import validate_import_options

IMPORT_EPILOG = """\
Set the API key or feed the --api-key commandline argument:
  export IBMCLOUD_API_KEY=<IBM_CLOUD_API_KEY>

examples:
  # import image using default storage type (service credential will be autogenerated)
  pvsadm image import -n upstream-core-lon04 -b <BUCKETNAME> \\
      --object-name rhel-83-10032020.ova.gz --image-name test-image -r <REGION>

  # import image with the access key and secret key given explicitly
  pvsadm image import -n upstream-core-lon04 -b <BUCKETNAME> \\
      --accesskey <ACCESSKEY> --secretkey <SECRETKEY> \\
      --object-name rhel-83-10032020.ova.gz --image-name test-image -r <REGION>

  # with user provided storage type and OS type
  pvsadm image import -n upstream-core-lon04 -b <BUCKETNAME> -r <REGION> \\
      --storagetype tier1 --ostype aix \\
      --object-name rhel-83-10032020.ova.gz --image-name test-image
"""


def add_instance_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the ``--instance-name`` / ``--instance-id`` pair to *parser*."""
    parser.add_argument(
        "-n", "--instance-name", default="", help="Instance name of the PowerVS",
    )
    parser.add_argument(
        "-i", "--instance-id", default="", help="Instance ID of the PowerVS instance",
    )


def register(subparsers: argparse._SubParsersAction) -> None:
    """Register the ``image`` command group."""
    image = subparsers.add_parser("image", help="PowerVS image operations")
    image_sub = image.add_subparsers(dest="image_command", metavar="<subcommand>")

    import_parser = image_sub.add_parser(
        "import",
        help="Import the image into PowerVS instances",
        description="Import the image into PowerVS instances",
        epilog=IMPORT_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    add_instance_arguments(import_parser)
    import_parser.add_argument(
        "-b", "--bucket", required=True, help="Cloud Storage bucket name",
    )
    import_parser.add_argument(
        "-r", "--region", required=True, help="COS bucket location",
    )
    import_parser.add_argument(
        "-o", "--object-name", required=True, help="Cloud Storage image filename",
    )
    import_parser.add_argument("--accesskey", default="", help="Cloud Storage access key")
    import_parser.add_argument("--secretkey", default="", help="Cloud Storage secret key")
    import_parser.add_argument(
        "--image-name", required=True, help="Name to give imported image",
    )
    import_parser.add_argument(
        "--ostype",
        default="redhat",
        help="Image OS Type, accepted values are [aix, ibmi, redhat, sles]",
    )
    import_parser.add_argument(
        "--storagetype",
        default="tier3",
        help="Storage type, accepted values are [tier1, tier3]",
    )
    import_parser.add_argument(
        "--service-credential-name",
        default="pvsadm-service-cred",
        help="Service Credential name to be auto generated",
    )
    import_parser.set_defaults(handler=handle_import)

    list_parser = image_sub.add_parser(
        "list", help="List the images of a PowerVS instance",
    )
    add_instance_arguments(list_parser)
    list_parser.set_defaults(handler=handle_list)


def options_from_args(args: argparse.Namespace) -> ImportOptions:
    """Pack parsed ``image import`` arguments into :class:`ImportOptions`."""
    return ImportOptions(
        bucket=args.bucket,
        region=args.region,
        object_name=args.object_name,
        image_name=args.image_name,
        instance_id=args.instance_id,
        instance_name=args.instance_name,
        access_key=args.accesskey,
        secret_key=args.secretkey,
        os_type=args.ostype,
        storage_type=args.storagetype,
        service_credential_name=args.service_credential_name,
    )


def handle_import(
    args: argparse.Namespace,
    context_factory: Callable[[], CloudContext],
) -> int:
    """Run the import workflow and report the state of the new image."""
    # Validate before authenticating so bad flags fail fast.
    options = validate_import_options(options_from_args(args))
    context = context_factory()

    image = context.import_service().run(options)
    console.print(
        f"[bold green]Import started.[/bold green]  "
        f"{escape(image.name)} [dim](ID: {image.image_id or 'pending'})[/dim] is {image.state or 'queued'}."
    )
    return exit_codes.SUCCESS


def handle_list(
    args: argparse.Namespace,
    context_factory: Callable[[], CloudContext],
) -> int:
    """Print the images of the selected instance as a table."""
    context = context_factory()
    service = context.image_service(
        instance_id=args.instance_id, instance_name=args.instance_name,
    )
    images = service.list_images()
    if not images:
        console.print("[yellow]No images found.[/yellow]")
        return exit_codes.SUCCESS
    output.print(build_image_table(images))
    return exit_codes.SUCCESS
