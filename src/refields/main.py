import argparse
import logging
from pathlib import Path

from selenium.common.exceptions import WebDriverException

from . import config
from .binder import FormBinder
from .errors import FieldRegistryError, FormSpecError, UnregisteredFieldError
from .form_spec import BUILTIN_FORMS, DECK_FORM, FormSpec, FormSpecReader
from .instrumentation import Cat
from .registry import FieldRegistry
from .session import FormSession
from .timing import phase_timer
from .values_dump import dump_values_json


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="refields",
        description="Bind a rendered form's fields and collect a submission payload.",
    )
    parser.add_argument(
        "--spec",
        default=DECK_FORM.form_id,
        help=f"Form spec file (YAML/JSON) or built-in form id ({', '.join(BUILTIN_FORMS)})",
    )
    parser.add_argument("--url", default=config.FORM_URL, help="Page that renders the form")
    parser.add_argument("--out", type=Path, default=None, help="Write the value snapshot to this JSON file")
    parser.add_argument("--dump", action="store_true", help="Write the value snapshot under the configured dump directory")
    parser.add_argument("--verbose", action="store_true", help="Log DEBUG to the console")
    return parser


def load_form_spec(spec_arg: str, logger: logging.Logger) -> FormSpec:
    if spec_arg in BUILTIN_FORMS:
        return BUILTIN_FORMS[spec_arg]
    return FormSpecReader(logger).read_path(spec_arg)


def collect(session: FormSession, spec: FormSpec, *, url: str, out: Path | None = None) -> list[tuple[str, str]]:
    """
    Open the page, mount the form, then read it the way a submit handler would.
    Raises UnregisteredFieldError when a declared field never mounted.
    """
    registry = FieldRegistry.create(spec.field_names, session=session)
    binder = FormBinder(session, spec, registry)

    with phase_timer(session, "mount", cat=Cat.BIND, ctx={"form": spec.form_id}):
        session.open(url)
        binder.mount()

    try:
        declared, mounted = registry.stats()
        session.emit_signal(Cat.REG, "Form ready", form=spec.form_id, declared=declared, mounted=mounted)

        values = registry.get_all_values()
        session.emit_signal(Cat.SUBMIT, f"Form values: {values!r}", form=spec.form_id)
        if out is not None:
            dump_values_json(
                values,
                out,
                form_id=spec.form_id,
                mount_state=registry.snapshot()["fields"],
                session=session,
            )

        with phase_timer(session, "submit", cat=Cat.SUBMIT, ctx={"form": spec.form_id}):
            return registry.get_submission_payload()
    finally:
        binder.unmount()


def main(argv=None):
    args = build_parser().parse_args(argv)
    logger = setup_logging(verbose_console=args.verbose)

    try:
        spec = load_form_spec(args.spec, logger)
    except (FileNotFoundError, FormSpecError) as e:
        logger.error("Could not load form spec %r: %s", args.spec, e)
        return 2

    out = args.out
    if out is None and args.dump:
        out = Path(config.DUMP_DIR) / f"{spec.form_id}_values.json"

    session = FormSession(logger)
    try:
        payload = collect(session, spec, url=args.url, out=out)
    except UnregisteredFieldError as e:
        logger.error("Submission aborted: field %r is not mounted. %s", e.field_name, e)
        return 1
    except FieldRegistryError as e:
        logger.error("Submission aborted: %s", e)
        return 1
    except WebDriverException as e:
        logger.error("Browser session failed. Message %r.", e)
        return 1
    finally:
        session.close()

    for name, value in payload:
        print(f"{name}={value}")
    return 0


def setup_logging(verbose_console: bool = False, log_file: str | None = None):
    logger = logging.getLogger("refields")
    logger.setLevel(logging.DEBUG)  # emit everything; handlers will filter

    # Clear existing handlers if this is called multiple times
    logger.handlers.clear()
    logger.propagate = False  # don't double-log via root

    fmt = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    formatter = logging.Formatter(fmt)

    # --- Console: WARNING (or DEBUG if verbose_console=True) ---
    console_handler = logging.StreamHandler()
    console_level = logging.DEBUG if verbose_console else logging.WARNING
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)

    # --- File: DEBUG, truncated each run ---
    file_handler = logging.FileHandler(log_file or config.LOG_FILE, mode="w", encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    file_handler.name = "default_file"

    logger.addHandler(console_handler)
    logger.addHandler(file_handler)

    return logger


if __name__ == "__main__":
    raise SystemExit(main())
