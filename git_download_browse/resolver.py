"""Resolve which repository an action should operate on.

Sources are tried in order: explicit argument, editor-context detectors,
clipboard, then a manual prompt. Anything not passed explicitly must be
confirmed before a mutating action runs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from . import manifest, npm
from .exceptions import EmptyInput, InvalidReference, ManifestError, UserAbort
from .models import EditorContext, Resolution, Source
from .references import parse_reference

logger = logging.getLogger(__name__)

Notify = Callable[[str], None]


@dataclass(frozen=True)
class Detector:
    """Turns an editor context into a reference string.

    ``resolve`` returns ``None`` when nothing is under the caret and raises
    ``DownloadBrowseError`` when something was found but cannot be resolved.
    """

    name: str
    applies: Callable[[EditorContext], bool]
    resolve: Callable[[EditorContext], Optional[str]]


def package_json_detector(
    lookup: Callable[[str], str] = npm.package_name_to_github_url,
    notify: Optional[Notify] = None,
) -> Detector:
    def applies(context: EditorContext) -> bool:
        return manifest.is_manifest(context.file) and context.file.is_file()

    def resolve(context: EditorContext) -> Optional[str]:
        if context.line is None:
            return None
        try:
            text = context.file.read_text(encoding="utf-8")
        except OSError as exc:
            raise ManifestError(f"Failed to read {context.file}: {exc}") from exc
        dependency = manifest.dependency_name_at(text, context.line, context.column or 0)
        if not dependency:
            return None
        message = f"Detected package.json dependency {dependency}"
        logger.info(message)
        if notify:
            notify(message)
        return lookup(dependency)

    return Detector(name=manifest.MANIFEST_NAME, applies=applies, resolve=resolve)


@dataclass
class ResolverChain:
    detectors: Sequence[Detector] = ()
    clipboard: Callable[[], str] = lambda: ""
    prompt: Callable[[], Optional[str]] = lambda: None
    confirm: Callable[[Resolution], bool] = lambda resolution: True
    warn: Notify = field(default=logger.warning)

    def resolve(self, argument: str | None = None, context: EditorContext | None = None) -> Resolution:
        text = (argument or "").strip()
        if text:
            return Resolution(ref=parse_reference(text), source=Source.ARGUMENT)

        detected = self._detect(context or EditorContext())
        if detected:
            return detected

        clipboard = (self.clipboard() or "").strip()
        if not clipboard:
            self.warn("Clipboard is empty - enter repository manually")
        else:
            try:
                return Resolution(ref=parse_reference(clipboard), source=Source.CLIPBOARD)
            except InvalidReference:
                self.warn("Clipboard content is not a valid repository - enter one manually")

        manual = (self.prompt() or "").strip()
        if not manual:
            raise EmptyInput("Clone cancelled: no repository provided")
        return Resolution(ref=parse_reference(manual), source=Source.MANUAL)

    def resolve_confirmed(self, argument: str | None = None, context: EditorContext | None = None) -> Resolution:
        resolution = self.resolve(argument, context)
        if resolution.provisional and not self.confirm(resolution):
            raise UserAbort("Clone cancelled")
        return resolution

    def _detect(self, context: EditorContext) -> Resolution | None:
        for detector in self.detectors:
            if not detector.applies(context):
                continue
            # Errors from a matching detector are surfaced, not skipped.
            value = detector.resolve(context)
            if value:
                return Resolution(ref=parse_reference(value), source=Source.DETECTED, detector=detector.name)
            return None
        return None
