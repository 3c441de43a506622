from typing import Any

from sealedshortener.utils.helpers import guarantee_500_response
from sealedshortener.lambdas.responses import response_200


@guarantee_500_response
def lambda_handler(event: dict, context: Any) -> dict:
    """Liveness check: respond 200 {"status": "ok"} without touching Redis or the key."""
    return response_200({'status': 'ok'})
