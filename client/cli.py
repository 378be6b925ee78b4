#!/usr/bin/env python3
"""
Command-line client for the File Storage API.

Keeps the session in a local file between runs, so after ``login`` the other
commands work without credentials until the token expires.
"""

import argparse
import getpass
import sys
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, TextIO

from client import messages
from client.api import ApiError, FileStorageClient
from client.config import ClientSettings
from client.formatting import format_file_size
from client.session import Session, SessionStore


def format_upload_date(value: Optional[str]) -> str:
    """``2026-10-19T08:30:00Z`` -> ``19.10.2026``"""
    if not value:
        return ""
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).strftime("%d.%m.%Y")
    except ValueError:
        return value


class FileStorageApp:
    """
    Session-aware front end over ``FileStorageClient``.

    Each command prints its outcome in Hebrew and returns an exit status.
    Server error text is shown as-is when the server provides it.
    """

    def __init__(
        self,
        client: FileStorageClient,
        store: SessionStore,
        out: Optional[TextIO] = None,
        confirm: Callable[[str], str] = input,
    ):
        self.client = client
        self.store = store
        self.out = out if out is not None else sys.stdout
        self.confirm = confirm
        self.session = store.load()
        self.restored = self.session is not None
        if self.session:
            client.set_token(self.session.token)

    def _say(self, text: str) -> None:
        print(text, file=self.out)

    def _fail(self, error: ApiError, fallback: str) -> int:
        self._say(error.message or fallback)
        return 1

    def _require_session(self) -> bool:
        if self.session is None:
            self._say(messages.LOGIN_REQUIRED)
            return False
        return True

    def _start_session(self, token: str, user: dict) -> None:
        self.session = Session(token=token, user=user)
        self.store.save(self.session)

    def _refresh(self) -> None:
        # The action already succeeded; a failed refresh only prints its error
        self.list_files()

    def resume(self) -> int:
        """Re-fetch the list for a session restored from disk.

        An expired saved token surfaces here as a failed fetch.
        """
        if not self.restored:
            return 0
        return self.list_files()

    def register(self, username: str, email: str, password: str) -> int:
        try:
            result = self.client.register(username, email, password)
        except ApiError as e:
            return self._fail(e, messages.REGISTER_ERROR)
        self._start_session(result.token, result.user)
        self._say(messages.REGISTER_SUCCESS)
        self._refresh()
        return 0

    def login(self, username: str, password: str) -> int:
        try:
            result = self.client.login(username, password)
        except ApiError as e:
            return self._fail(e, messages.LOGIN_ERROR)
        self._start_session(result.token, result.user)
        self._say(messages.LOGIN_SUCCESS)
        self._refresh()
        return 0

    def logout(self) -> int:
        self.store.clear()
        self.session = None
        self.restored = False
        self.client.set_token(None)
        self._say(messages.LOGOUT_SUCCESS)
        return 0

    def list_files(self) -> int:
        if not self._require_session():
            return 1
        try:
            files = self.client.list_files()
        except ApiError as e:
            return self._fail(e, messages.LOAD_FILES_ERROR)

        self._say(messages.GREETING.format(username=self.session.username))
        self._say(messages.MY_FILES.format(count=len(files)))
        if not files:
            self._say(messages.NO_FILES)
            return 0

        for item in files:
            self._say(f"[{item['id']}] {item['originalName']}")
            self._say("    " + messages.FILE_SIZE.format(size=format_file_size(item["size"])))
            self._say("    " + messages.FILE_TYPE.format(mime_type=item.get("mimeType") or ""))
            self._say(
                "    " + messages.FILE_UPLOADED_AT.format(date=format_upload_date(item.get("uploadedAt")))
            )
        return 0

    def upload(self, path: Path) -> int:
        if not self._require_session():
            return 1
        path = Path(path)
        if not path.is_file():
            self._say(messages.UPLOAD_FILE_MISSING.format(path=path))
            return 1

        self._say(messages.UPLOADING)
        try:
            self.client.upload(path)
        except ApiError as e:
            return self._fail(e, messages.UPLOAD_ERROR)
        self._say(messages.UPLOAD_SUCCESS)
        self._refresh()
        return 0

    def download(self, file_id: int, destination: Path) -> int:
        if not self._require_session():
            return 1
        try:
            target = self.client.download(file_id, destination)
        except ApiError as e:
            return self._fail(e, messages.DOWNLOAD_ERROR)
        except OSError:
            self._say(messages.DOWNLOAD_ERROR)
            return 1
        self._say(messages.DOWNLOAD_SUCCESS.format(path=target))
        return 0

    def delete(self, file_id: int, assume_yes: bool = False) -> int:
        if not self._require_session():
            return 1
        if not assume_yes:
            answer = self.confirm(f"{messages.DELETE_CONFIRM} [כ/ל] ")
            if answer.strip().lower() not in messages.YES_ANSWERS:
                self._say(messages.DELETE_CANCELLED)
                return 1
        try:
            self.client.delete_file(file_id)
        except ApiError as e:
            return self._fail(e, messages.DELETE_ERROR)
        self._say(messages.DELETE_SUCCESS)
        self._refresh()
        return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="file-storage",
        description=messages.APP_TITLE,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  file-storage register alice alice@example.com
  file-storage login alice
  file-storage upload ./דוח.pdf
  file-storage list
  file-storage download 3 --output ~/Downloads
  file-storage delete 3
  file-storage logout
        """,
    )
    parser.add_argument("--api-url", help="API server root (default: FILE_STORAGE_API_URL)")
    parser.add_argument("--session-file", type=Path, help="Session file location")

    commands = parser.add_subparsers(dest="command", required=True)

    register = commands.add_parser("register", help="Create an account and sign in")
    register.add_argument("username")
    register.add_argument("email")
    register.add_argument("--password", help="Prompted for when omitted")

    login = commands.add_parser("login", help="Sign in with a username or email")
    login.add_argument("username")
    login.add_argument("--password", help="Prompted for when omitted")

    commands.add_parser("logout", help="Forget the saved session")
    commands.add_parser("list", help="List your files")

    upload = commands.add_parser("upload", help="Upload a file")
    upload.add_argument("path", type=Path)

    download = commands.add_parser("download", help="Download a file by id")
    download.add_argument("file_id", type=int)
    download.add_argument("--output", "-o", type=Path, default=Path("."), help="Target directory")

    delete = commands.add_parser("delete", help="Delete a file by id")
    delete.add_argument("file_id", type=int)
    delete.add_argument("--yes", "-y", action="store_true", help="Skip the confirmation prompt")

    return parser


def run(app: FileStorageApp, args: argparse.Namespace) -> int:
    if args.command == "register":
        password = args.password or getpass.getpass(messages.PROMPT_PASSWORD)
        return app.register(args.username, args.email, password)
    if args.command == "login":
        password = args.password or getpass.getpass(messages.PROMPT_PASSWORD)
        return app.login(args.username, password)
    if args.command == "logout":
        return app.logout()
    if args.command == "list":
        return app.list_files()
    if args.command == "upload":
        return app.upload(args.path)
    if args.command == "download":
        # Upload, delete and list all end by showing the list; download shows it first
        status = app.resume()
        if status:
            return status
        return app.download(args.file_id, args.output)
    if args.command == "delete":
        return app.delete(args.file_id, assume_yes=args.yes)
    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the command-line client."""
    args = build_parser().parse_args(argv)
    settings = ClientSettings()

    store = SessionStore(args.session_file or settings.session_file)
    with FileStorageClient(args.api_url or settings.api_url, timeout=settings.timeout) as client:
        return run(FileStorageApp(client, store), args)


if __name__ == "__main__":
    sys.exit(main())
