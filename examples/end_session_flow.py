import os
import sys

# Add src to path for running directly
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "../src")))

from coreason_logout import EndSessionResponse, LogoutManager, ServiceConfiguration, request_from_json_string
from coreason_logout.config import CoreasonLogoutConfig
from coreason_logout.end_session_request import EndSessionRequestBuilder


def main() -> None:
    """
    Demonstrates an RP-initiated logout round trip without a browser:
    - Settings-driven request construction
    - Persisting the request for process recovery
    - Handing the response across a component boundary in an envelope
    """
    print(">>> Starting End Session Example")

    config = CoreasonLogoutConfig(
        client_id="my-app",
        logout_uri="com.example.app:/logout",
        authorization_endpoint="https://auth.example.com/authorize",
        token_endpoint="https://auth.example.com/token",
        end_session_endpoint="https://auth.example.com/logout",
    )
    manager = LogoutManager(config)

    request = manager.create_request()
    print(f">>> Redirect user agent to: {manager.build_logout_url(request)}")

    saved = manager.persist_request(request)
    print(f">>> Persisted request: {saved}")

    # ... the process may die here; the browser returns to the logout URI ...
    recovered = request_from_json_string(saved)
    response = manager.complete(recovered, "com.example.app:/logout")  # type: ignore[arg-type]

    envelope = response.to_envelope()
    print(f">>> Envelope keys: {list(envelope)}")
    extracted = EndSessionResponse.from_envelope(envelope)
    print(f">>> Extracted response for client: {extracted.request.client_id if extracted else None}")

    # Discovery documents fetched elsewhere can seed a configuration directly
    discovered = ServiceConfiguration.from_discovery_document(
        {
            "issuer": "https://auth.example.com/",
            "authorization_endpoint": "https://auth.example.com/authorize",
            "token_endpoint": "https://auth.example.com/token",
            "end_session_endpoint": "https://auth.example.com/logout",
        }
    )
    alt = EndSessionRequestBuilder(discovered, "my-app", "https://app.example.com/signed-out").build()
    print(f">>> Discovery-based redirect: {alt.to_uri()}")


if __name__ == "__main__":
    main()
