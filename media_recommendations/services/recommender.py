"""
Recommendation orchestrator for the Discovery Engine recommendation service.

For every user event of the input file, in order:

1. Convert the raw JSON event into a `RecommendRequest` for the configured
   serving config (`services.requests_builder`).
2. Call `recommend` synchronously, one request in flight at a time.
3. Walk the returned results in the order the service ranked them, pull the
   `title` out of each embedded document (`services.documents`) and format the
   `score` metadata with five decimals.
4. Write each result to the output log before moving to the next event.

The run is all-or-nothing: the first failure (bad event, bad document,
service error) aborts it. Results already written stay written. There is no
retry; re-run the command.
"""
from __future__ import annotations

import contextlib
from typing import Any, Callable, List, Mapping, Optional, Sequence

from google.api_core import exceptions as g_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud import discoveryengine_v1beta as discoveryengine

from media_recommendations.errors import RemoteCallError
from media_recommendations.models.recommender import Configuration, RecommendationResult
from media_recommendations.services.documents import extract_fields, field_as_str
from media_recommendations.services.requests_builder import build_request
from media_recommendations.utils.logger import Logger

REMOTE_ERRORS = (
    g_exceptions.GoogleAPICallError,   # transport / service side / validation
    g_exceptions.RetryError,           # transport gave up
    auth_exceptions.GoogleAuthError,   # missing or bad credentials
)

ClientFactory = Callable[[], Any]


def format_score(metadata: Optional[Mapping[str, Any]]) -> str:
    """Fixed 5-decimal rendering of the `score` metadata (0 when missing)."""
    score = metadata.get("score") if metadata else None
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        score = 0.0
    return f"{float(score):.5f}"


class Recommender:
    """Sequential recommendation runner bound to one Configuration."""

    def __init__(
        self,
        config: Configuration,
        *,
        logger: Optional[Logger] = None,
        recommendation_client_factory: Optional[ClientFactory] = None,
        document_client_factory: Optional[ClientFactory] = None,
        lookup_titles: bool = False,
    ) -> None:
        self.config = config
        self.logger = logger or Logger()
        self.lookup_titles = lookup_titles
        self._recommendation_client_factory = (
            recommendation_client_factory or discoveryengine.RecommendationServiceClient
        )
        self._document_client_factory = document_client_factory or discoveryengine.DocumentServiceClient
        self._recommendation_client = None
        self._document_client = None
        self._stack = contextlib.ExitStack()

    def __enter__(self) -> "Recommender":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Close every client opened by this recommender."""
        self._recommendation_client = None
        self._document_client = None
        self._stack.close()

    def _open_client(self, factory: ClientFactory, kind: str):
        self.logger.info(f"Establishing a Discovery Engine {kind} Client")
        try:
            client = factory()
        except REMOTE_ERRORS as exc:
            raise RemoteCallError(
                f"Failed to establish a Discovery Engine {kind} Client", stage="connect"
            ) from exc
        return self._stack.enter_context(client)

    @property
    def recommendation_client(self):
        if self._recommendation_client is None:
            self._recommendation_client = self._open_client(
                self._recommendation_client_factory, "Recommendation"
            )
        return self._recommendation_client

    @property
    def document_client(self):
        if self._document_client is None:
            self._document_client = self._open_client(self._document_client_factory, "Document")
        return self._document_client

    def execute_requests(self, events: Sequence[Any]) -> List[RecommendationResult]:
        """Request recommendations for each user event; return every emitted result."""
        client = self.recommendation_client
        emitted: List[RecommendationResult] = []

        for number, event in enumerate(events, start=1):
            self.logger.info("Initiating Recommendation Request", number=number)
            self.logger.info("...", parameters=event)

            request = build_request(event, self.config)
            try:
                response = client.recommend(request=request)
            except REMOTE_ERRORS as exc:
                raise RemoteCallError(f"Recommendation request {number} failed") from exc

            for item in response.results:
                result = self._to_result(item)
                self.logger.info("...", results=result.model_dump())
                emitted.append(result)

            self.logger.debug("Recommendation Request Completed", number=number, count=len(response.results))

        return emitted

    def _to_result(self, item: Any) -> RecommendationResult:
        fields = extract_fields(item.document)
        title = field_as_str(fields, "title")
        if not title and self.lookup_titles and item.id:
            title = self.get_document_title(item.id)
        return RecommendationResult(
            id=item.id,
            title=title,
            score=format_score(item.metadata),
        )

    def get_document_title(self, document_id: str) -> str:
        """Fetch a document by id from the configured branch and return its title."""
        request = discoveryengine.GetDocumentRequest(name=self.config.document_name(document_id))
        try:
            document = self.document_client.get_document(request=request)
        except REMOTE_ERRORS as exc:
            raise RemoteCallError(f"Document request for {document_id} failed") from exc
        return field_as_str(extract_fields(document), "title")
