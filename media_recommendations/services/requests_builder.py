import json
import logging
from typing import Any

from google.cloud import discoveryengine_v1beta as discoveryengine
from google.protobuf import json_format

from media_recommendations.errors import SchemaConversionError
from media_recommendations.models.recommender import Configuration

LOGGER = logging.getLogger(__name__)

# Always asked for, whatever the user event says.
RECOMMEND_OPTIONS = ("disableFallback", "strictFiltering", "returnDocument", "returnScore")


def to_user_event(event: Any) -> discoveryengine.UserEvent:
    """Convert one loosely typed input record into the service's UserEvent."""
    if not isinstance(event, dict):
        raise SchemaConversionError(
            f"User event must be a JSON object, got {type(event).__name__}"
        )
    try:
        return discoveryengine.UserEvent.from_json(json.dumps(event))
    except (json_format.ParseError, TypeError, ValueError) as exc:
        raise SchemaConversionError("Encoding the user event as a UserEvent message failed") from exc


def build_request(event: Any, config: Configuration) -> discoveryengine.RecommendRequest:
    """Build the RecommendRequest for one user event."""
    user_event = to_user_event(event)
    request = discoveryengine.RecommendRequest(
        serving_config=config.serving_config_path,
        user_event=user_event,
        page_size=config.page_size,
        filter=config.filter,
        validate_only=False,
        params={name: True for name in RECOMMEND_OPTIONS},
    )
    LOGGER.debug("Built recommend request for %s", config.serving_config_path)
    return request
