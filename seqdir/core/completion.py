"""Parse RunCompletionStatus.xml.

The instrument writes RunCompletionStatus.xml when a run stops. It carries a
``CompletionStatus`` code, the ``RunId`` and an optional ``ErrorDescription``.
Codes this module does not know map to ``CompletionCode.UNRECOGNIZED`` with the
literal code kept in ``raw_code``; an unknown code is never a parse error.

The file may be read while the instrument is still writing it, so parse errors
are expected and callers should treat them as "not yet determinable".
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from seqdir.errors import CompletionEncodingError, MalformedCompletionError

RUN_COMPLETION_STATUS_XML = "RunCompletionStatus.xml"

_ROOT_TAG = "RunCompletionStatus"
_RUN_ID = "RunId"
_COMPLETION_STATUS = "CompletionStatus"
_ERROR_DESCRIPTION = "ErrorDescription"
_NO_MESSAGE = "None"


class CompletionCode(str, Enum):
    """Completion status codes reported by the instrument."""

    COMPLETED_AS_PLANNED = "CompletedAsPlanned"
    EXCEPTION_ENDED_EARLY = "ExceptionEndedEarly"
    USER_ENDED_EARLY = "UserEndedEarly"
    UNRECOGNIZED = "Unrecognized"

    @classmethod
    def from_text(cls, text: str) -> CompletionCode:
        for code in cls:
            if code is not cls.UNRECOGNIZED and code.value == text:
                return code
        return cls.UNRECOGNIZED


@dataclass(frozen=True)
class CompletionStatus:
    """Outcome of a run as recorded in RunCompletionStatus.xml."""

    completion_status: CompletionCode
    run_id: str
    message: Optional[str] = None
    raw_code: Optional[str] = None

    def __post_init__(self) -> None:
        # stored the way parsed text reads back
        run_id = self.run_id.strip()
        if not run_id:
            raise ValueError("run_id must not be empty")
        object.__setattr__(self, "run_id", run_id)
        object.__setattr__(self, "message", _clean_message(self.message))
        if self.raw_code is not None:
            object.__setattr__(self, "raw_code", self.raw_code.strip())

        # raw_code is only meaningful for codes outside the known set
        if self.completion_status is CompletionCode.UNRECOGNIZED:
            if not self.raw_code:
                object.__setattr__(self, "raw_code", CompletionCode.UNRECOGNIZED.value)
        elif self.raw_code is not None:
            object.__setattr__(self, "raw_code", None)

    @classmethod
    def from_code(cls, code: str, run_id: str, message: Optional[str] = None) -> CompletionStatus:
        code = code.strip()
        completion_status = CompletionCode.from_text(code)
        raw_code = code if completion_status is CompletionCode.UNRECOGNIZED else None
        return cls(completion_status, run_id, message, raw_code)

    @property
    def code(self) -> str:
        """Code text as written in the file."""
        return self.raw_code or self.completion_status.value

    @property
    def is_success(self) -> bool:
        return self.completion_status is CompletionCode.COMPLETED_AS_PLANNED

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "completion_status": self.completion_status.value,
            "run_id": self.run_id,
            "message": self.message,
        }
        if self.raw_code is not None:
            payload["raw_code"] = self.raw_code
        return payload

    def __str__(self) -> str:
        return f"{self.code} : {self.run_id} : {self.message or _NO_MESSAGE}"


def parse_completion_status(data: bytes) -> CompletionStatus:
    """Parse the content of RunCompletionStatus.xml.

    Raises:
        CompletionEncodingError: content is not UTF-8
        MalformedCompletionError: not well-formed XML, or RunId/CompletionStatus
            missing or empty
    """
    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise CompletionEncodingError(f"Could not decode as UTF-8: {exc}") from exc

    try:
        document = ET.fromstring(text)
    except ET.ParseError as exc:
        raise MalformedCompletionError(f"Could not parse as XML: {exc}") from exc

    run_id = _element_text(document, _RUN_ID)
    if run_id is None:
        raise MalformedCompletionError(f"missing {_RUN_ID} tag")
    if not run_id:
        raise MalformedCompletionError(f"{_RUN_ID} tag is empty")

    code = _element_text(document, _COMPLETION_STATUS)
    if code is None:
        raise MalformedCompletionError(f"missing {_COMPLETION_STATUS} tag")
    if not code:
        raise MalformedCompletionError(f"{_COMPLETION_STATUS} tag is empty")

    message = _element_text(document, _ERROR_DESCRIPTION)
    return CompletionStatus.from_code(code, run_id, message)


def read_completion_status(path: Path) -> CompletionStatus:
    """Read and parse a RunCompletionStatus.xml file.

    Raises OSError when the file cannot be read, in addition to the parse errors
    of ``parse_completion_status``.
    """
    return parse_completion_status(Path(path).read_bytes())


def render_completion_status(status: CompletionStatus) -> bytes:
    """Render ``status`` in the RunCompletionStatus.xml layout."""
    document = ET.Element(_ROOT_TAG)
    ET.SubElement(document, _COMPLETION_STATUS).text = status.code
    ET.SubElement(document, _RUN_ID).text = status.run_id
    ET.SubElement(document, _ERROR_DESCRIPTION).text = status.message or _NO_MESSAGE
    ET.indent(document)
    return ET.tostring(document, encoding="utf-8", xml_declaration=True) + b"\n"


def _clean_message(message: Optional[str]) -> Optional[str]:
    """ErrorDescription text, or None when it is missing, blank or "None"."""
    if message is None:
        return None
    message = message.strip()
    if not message or message == _NO_MESSAGE:
        return None
    return message


def _element_text(document: ET.Element, name: str) -> Optional[str]:
    """Stripped text of the first element named ``name``, ignoring namespaces.

    Returns None when no such element exists and "" when it has no text.
    """
    for element in document.iter():
        if not isinstance(element.tag, str):
            continue
        if _local_name(element.tag) == name:
            return (element.text or "").strip()
    return None


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]
