from __future__ import annotations

import json
import logging
import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from .constants import DEFAULT_REPORTS_DIR

if TYPE_CHECKING:
    from .backends.protocol import ResolutionContext
    from .config import Configuration

logger = logging.getLogger(__name__)


@dataclass
class FailureArtifactsOptions:
    output_dir: str = DEFAULT_REPORTS_DIR
    capture_screenshot: bool = True
    capture_page_source: bool = True
    persist: bool = True
    on_before_persist: Callable[[RedactionContext], RedactionResult] | None = None

    @classmethod
    def from_config(cls, config: Configuration) -> FailureArtifactsOptions:
        return cls(
            output_dir=config.reports_dir,
            capture_screenshot=config.screenshots,
            capture_page_source=config.save_page_source,
        )


@dataclass
class RedactionContext:
    run_id: str
    reason: str
    screenshot: bytes | None
    page_source: str | None
    metadata: dict[str, Any]


@dataclass
class RedactionResult:
    page_source: str | None = None
    drop_screenshot: bool = False
    drop_page_source: bool = False


@dataclass
class FailureArtifacts:
    """What the reporter attached to a terminal error."""

    run_id: str
    reason: str
    run_dir: Path | None = None
    screenshot_path: Path | None = None
    page_source_path: Path | None = None
    screenshot: bytes | None = field(default=None, repr=False)
    page_source: str | None = field(default=None, repr=False)
    capture_errors: dict[str, str] = field(default_factory=dict)


def _describe_error(error: BaseException) -> dict[str, Any]:
    cause = getattr(error, "cause", None)
    history = getattr(error, "history", None) or []
    return {
        "error_type": type(error).__name__,
        "reason_code": getattr(error, "reason_code", None),
        "message": str(error),
        "operation": getattr(error, "operation", None),
        "locator": getattr(error, "locator", None),
        "attempts": getattr(error, "attempts", None),
        "cause": None if cause is None else {"type": type(cause).__name__, "message": str(cause)},
        "history": [h.model_dump() if hasattr(h, "model_dump") else h for h in history],
    }


class FailureReporter:
    """
    Default on_failure hook: capture, optionally persist, and attach artifacts.

    Capture is best-effort. A backend that cannot take screenshots (or whose
    capture call fails) is recorded in `capture_errors`; the original error is
    still returned.
    """

    def __init__(
        self,
        *,
        options: FailureArtifactsOptions | None = None,
        time_fn: Callable[[], float] = time.time,
    ) -> None:
        self.options = options or FailureArtifactsOptions()
        self._time_fn = time_fn

    def __call__(self, context: ResolutionContext, error: BaseException) -> BaseException:
        reason = getattr(error, "reason_code", None) or type(error).__name__
        artifacts = FailureArtifacts(run_id=uuid.uuid4().hex[:12], reason=reason)

        if self.options.capture_screenshot:
            artifacts.screenshot = self._capture("screenshot", context.screenshot_png, artifacts)
        if self.options.capture_page_source:
            artifacts.page_source = self._capture("page_source", context.page_source, artifacts)

        metadata = _describe_error(error)
        metadata["backend"] = context.__class__.__name__

        if self.options.on_before_persist is not None:
            try:
                result = self.options.on_before_persist(
                    RedactionContext(
                        run_id=artifacts.run_id,
                        reason=reason,
                        screenshot=artifacts.screenshot,
                        page_source=artifacts.page_source,
                        metadata=metadata,
                    )
                )
                if result.page_source is not None:
                    artifacts.page_source = result.page_source
                if result.drop_screenshot:
                    artifacts.screenshot = None
                if result.drop_page_source:
                    artifacts.page_source = None
            except Exception as e:
                logger.warning(f"on_before_persist failed ({e}); dropping captured artifacts")
                artifacts.screenshot = None
                artifacts.page_source = None

        error.artifacts = artifacts  # type: ignore[attr-defined]
        if self.options.persist:
            try:
                self.persist(artifacts, metadata)
            except OSError as e:
                logger.warning(f"Failed to persist failure artifacts: {e}")
                artifacts.capture_errors["persist"] = str(e)
        return error

    def _capture(
        self, kind: str, fn: Callable[[], Any], artifacts: FailureArtifacts
    ) -> Any | None:
        try:
            return fn()
        except NotImplementedError as e:
            logger.debug(f"{kind} capture unsupported: {e}")
            artifacts.capture_errors[kind] = f"unsupported: {e}"
        except Exception as e:
            logger.warning(f"{kind} capture failed: {e}")
            artifacts.capture_errors[kind] = str(e)
        return None

    def _write_json_atomic(self, path: Path, data: Any) -> None:
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(data, indent=2, default=str))
        tmp_path.replace(path)

    def persist(self, artifacts: FailureArtifacts, metadata: dict[str, Any]) -> Path:
        output_dir = Path(self.options.output_dir)
        ts = int(self._time_fn() * 1000)
        run_dir = output_dir / f"{artifacts.run_id}-{ts}"
        run_dir.mkdir(parents=True, exist_ok=True)

        if artifacts.screenshot is not None:
            artifacts.screenshot_path = run_dir / "screenshot.png"
            artifacts.screenshot_path.write_bytes(artifacts.screenshot)
        if artifacts.page_source is not None:
            artifacts.page_source_path = run_dir / "page_source.html"
            artifacts.page_source_path.write_text(artifacts.page_source, encoding="utf-8")

        manifest = {
            "run_id": artifacts.run_id,
            "created_at_ms": ts,
            "reason": artifacts.reason,
            "screenshot": "screenshot.png" if artifacts.screenshot_path else None,
            "page_source": "page_source.html" if artifacts.page_source_path else None,
            "capture_errors": artifacts.capture_errors,
            "redacted": self.options.on_before_persist is not None,
            "metadata": metadata,
        }
        self._write_json_atomic(run_dir / "manifest.json", manifest)
        artifacts.run_dir = run_dir
        logger.info(f"Failure artifacts written to {run_dir}")
        return run_dir
