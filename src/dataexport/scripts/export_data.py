"""Load DataItem records from local JSON files into an application's datastore.

Logs in as an admin user, opens a remote API session with the application and
writes one DataItem per file, either a single file or every matching file in
a directory tree.

Usage:
    export-data -email admin@example.com -host my-app.appspot.com \\
        -password_file ~/.my_password -data_file item.json

    # Development server on localhost, no password needed
    export-data -email test@test.com -host localhost:8080 -data_dir data/

Options:
    -host: Hostname of the application (hostname or host:port)
    -email: Email of an admin user for the application
    -password_file: File containing the user's password (not needed for local hosts)
    -data_file: File containing one DataItem
    -data_dir: Directory with files containing one item each
    -file_pattern: Regex for file names under -data_dir (default: data_item_\\d+\\.json)

Exit status is 0 on success. Configuration, login and session failures exit
with 1, as does any failure in -data_file mode. In -data_dir mode individual
file failures are logged and summarised but do not change the exit status.
"""

import argparse
import sys
from typing import List, Optional

import httpx
from loguru import logger

from dataexport.core.config import settings
from dataexport.core.exceptions import DataExportError
from dataexport.core.import_config import ImportConfig
from dataexport.core.logger import setup_logging
from dataexport.worker.auth import authenticated_client, select_credentials
from dataexport.worker.main import run_job
from dataexport.worker.remote_api import RemoteSession


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="export-data",
        description="Export DataItem records to a remote application datastore",
    )
    parser.add_argument("-host", "--host", default="", help="hostname of application")
    parser.add_argument(
        "-email", "--email", default="", help="email of an admin user for the application"
    )
    parser.add_argument(
        "-password_file",
        "--password-file",
        dest="password_file",
        default="",
        help="file which contains the user's password",
    )
    parser.add_argument(
        "-data_file", "--data-file", dest="data_file", default="", help="file which contains DataItem"
    )
    parser.add_argument(
        "-data_dir",
        "--data-dir",
        dest="data_dir",
        default="",
        help="directory with files containing one item each",
    )
    parser.add_argument(
        "-file_pattern",
        "--file-pattern",
        dest="file_pattern",
        default=settings.DEFAULT_FILE_PATTERN,
        help="if -data_dir is set, files matching this pattern will be parsed "
        "(default: %(default)s)",
    )
    return parser


def main(
    argv: Optional[List[str]] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> int:
    """Runs the tool and returns the process exit status."""
    setup_logging()
    args = build_parser().parse_args(argv)

    client: Optional[httpx.Client] = None
    try:
        config = ImportConfig.from_args(args)
        credentials = select_credentials(config)
        client = authenticated_client(config.host, credentials, transport=transport)

        session = RemoteSession.connect(config.host, client)
        logger.info(f"App ID {session.app_id!r}")

        run_job(session, config.job)
    except DataExportError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1
    finally:
        if client is not None:
            client.close()

    return 0


def run() -> None:
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nExport interrupted.")
        sys.exit(130)


if __name__ == "__main__":
    run()
