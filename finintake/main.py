import argparse
from pathlib import Path

from finintake.config.settings import Settings
from finintake.database.connection import apply_schema, close_pool, init_pool
from finintake.database.models import MEDIA_KIND_AUDIO, MEDIA_KIND_DOCUMENT
from finintake.database.repositories.document_repository import FinancialDocumentRepository
from finintake.database.repositories.event_repository import EventRepository
from finintake.dispatch.dispatcher import build_dispatcher
from finintake.dispatch.events import AUDIO_UPLOADED, DOCUMENT_UPLOADED, upload_payload
from finintake.logging.logger import Log
from finintake.processor.processor import build_processors
from finintake.worker.job_runner import JobRunner
from finintake.worker.worker import Worker

AUDIO_SUFFIXES = frozenset({".wav", ".mp3"})


def run_worker(settings: Settings) -> None:
    """Build dependencies, fail fast on missing credentials, then start the worker loop."""
    document_job, audio_job = build_processors(settings)
    event_repo = EventRepository(settings.max_event_attempts)
    dispatcher = build_dispatcher(
        settings,
        document_handler=JobRunner(document_job, event_repo, settings).run,
        audio_handler=JobRunner(audio_job, event_repo, settings).run,
    )
    try:
        Worker(event_repo, dispatcher, settings).run()
    finally:
        dispatcher.shutdown(wait=True)


def submit_upload(file_path: Path, media_kind: str | None = None) -> str:
    """Register an uploaded file the way the upload endpoint does and return its document ID."""
    path = file_path.resolve()
    if media_kind is None:
        media_kind = MEDIA_KIND_AUDIO if path.suffix.lower() in AUDIO_SUFFIXES else MEDIA_KIND_DOCUMENT
    record = FinancialDocumentRepository().create(path.name, str(path), media_kind)
    event_name = AUDIO_UPLOADED if media_kind == MEDIA_KIND_AUDIO else DOCUMENT_UPLOADED
    event_id = EventRepository(max_attempts=1).publish(
        event_name, upload_payload(record.id, str(path))
    )
    Log.info(f"Submitted {path.name} as document {record.id}", event_id=event_id)
    return record.id


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="finintake")
    commands = parser.add_subparsers(dest="command")
    commands.add_parser("worker", help="poll upload events and process them (default)")
    commands.add_parser("init-db", help="create tables if missing")
    submit = commands.add_parser("submit", help="register a local file as an upload")
    submit.add_argument("path", type=Path)
    submit.add_argument("--kind", choices=[MEDIA_KIND_DOCUMENT, MEDIA_KIND_AUDIO])
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Entry point: initialize pool -> run the requested command."""
    args = _parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)
    init_pool(settings)

    try:
        if args.command == "init-db":
            apply_schema()
        elif args.command == "submit":
            print(submit_upload(args.path, args.kind))
        else:
            run_worker(settings)
    finally:
        close_pool()


if __name__ == "__main__":
    main()
