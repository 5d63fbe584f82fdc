"""
The analysis session: one source buffer, one request at a time, one
selected stage.

    idle --submit--> submitting --success--> idle   (result stored, stage = lexical)
                                --failure--> idle   (result absent, error kept)
"""

from typing import Callable, List, Optional

from config import (
    ANALYZER_DEBUG,
    API_URL,
    DEFAULT_SOURCE,
    STAGE_LEXICAL,
    STATUS_IDLE,
    STATUS_SUBMITTING,
)
from errors import AnalyzerError, SchemaError, ServiceError, ValidationError
from normalizer import count_errors, normalize_result
from service import post_analysis
import stage_gate


class AnalysisSession:
    """Single source of truth for the code buffer, request status and stage selection."""

    def __init__(self, transport: Callable = None, source: str = DEFAULT_SOURCE, api_url: str = API_URL):
        self.api_url = api_url
        self.transport = transport or self._post
        self.source = source
        self.result = None
        self.active_stage = None
        self.status = STATUS_IDLE
        self.last_error = None

    async def _post(self, source: str) -> dict:
        return await post_analysis(source, api_url=self.api_url)

    async def _fetch_payload(self) -> dict:
        # Custom transports may raise anything; callers only ever see ServiceError
        try:
            return await self.transport(self.source)
        except AnalyzerError:
            raise
        except Exception as e:
            raise ServiceError(f"Transport failed: {e}") from e

    # --- Source buffer ---

    def set_source(self, text: str) -> None:
        """Replaces the buffer; the current result no longer describes it."""
        self.source = text if text is not None else ""
        self.result = None
        self.active_stage = None

    # --- Request lifecycle ---

    @property
    def is_submitting(self) -> bool:
        return self.status == STATUS_SUBMITTING

    @property
    def has_result(self) -> bool:
        return self.result is not None

    async def submit(self) -> Optional[dict]:
        """
        Sends the buffer for analysis and stores the canonical result.
        Returns None without sending anything while a request is in flight.

        Raises:
            ValidationError: the buffer is empty or whitespace-only.
            ServiceError: the service could not be reached or refused the request.
            SchemaError: the response matches no known result shape.
        """
        if not self.source or not self.source.strip():
            self.last_error = ValidationError()
            raise self.last_error

        if self.is_submitting:
            print("LOG: Analysis already in flight. Skipping concurrent submit.")
            return None

        self.status = STATUS_SUBMITTING
        self.result = None
        self.active_stage = None
        self.last_error = None
        print(f"LOG: Submitting {len(self.source)} chars for analysis...")

        try:
            payload = await self._fetch_payload()
            result = normalize_result(payload)
        except ServiceError as e:
            print(f"Error: Analysis request failed: {e}")
            self.last_error = e
            raise
        except SchemaError as e:
            print(f"Error: Unrecognized analysis payload ({e.field})")
            self.last_error = e
            raise
        finally:
            self.status = STATUS_IDLE

        # Applied even if the buffer changed meanwhile: the latest resolved request wins
        self.result = result
        self.active_stage = STAGE_LEXICAL
        print(f"LOG: Analysis complete: tokens={len(result['tokens'])} errors={count_errors(result)}")
        if ANALYZER_DEBUG:
            print(f"[Session] stage_status={result['stage_status']}")
        return result

    def dismiss_error(self) -> None:
        self.last_error = None

    # --- Stage selection ---

    def select_stage(self, stage) -> Optional[str]:
        """Opens `stage` if the gate allows it; otherwise nothing changes."""
        self.active_stage = stage_gate.select_stage(self.result, self.active_stage, stage)
        return self.active_stage

    @property
    def selectable_stages(self) -> List[str]:
        return stage_gate.selectable_stages(self.result)

    @property
    def stage_controls(self) -> List[dict]:
        return stage_gate.stage_controls(self.result, self.active_stage)
