#!/usr/bin/env python3
"""
Basic usage examples for the Semantria Python client library.

Credentials are read from SEMANTRIA_* environment variables (or an optional
JSON config file given as the first argument). Either set
SEMANTRIA_CONSUMER_KEY and SEMANTRIA_CONSUMER_SECRET, or SEMANTRIA_APP_KEY
together with SEMANTRIA_USERNAME and SEMANTRIA_PASSWORD.
"""

import logging
import sys
import time
import uuid

from semantria_client import (
    CallbackObserver,
    SemantriaClient,
    SemantriaClientError,
    load_config,
)


def main(config_path=None):
    """Run basic usage examples."""

    print("=== Semantria Python Client Basic Usage Examples ===\n")

    config = load_config(config_path, application_name="example_usage")

    observer = CallbackObserver(
        on_request=lambda event: print(f"   -> {event['method']} {event['url']}"),
        on_error=lambda event: print(f"   !! status {event['status']}: {event['message']}"),
    )

    # Create client
    print("1. Creating client...")
    client = SemantriaClient(observer=observer, **config)
    print(f"   Client created for: {client.session.api_host}\n")

    try:
        print("2. Resolving credentials...")
        session = client.resolve()
        print(f"   Consumer key: {session.consumer_key[:4]}...\n")

        print("3. Fetching service status...")
        status = client.get("status")
        print(f"   Service version: {status.get('service_version', 'Unknown')}\n")

        print("4. Queueing a document...")
        document_id = str(uuid.uuid4())
        document = {"id": document_id, "text": "Semantria makes text analytics easy."}
        result = client.post("document", post_params=document)
        print(f"   Queue result: {result}\n")

        print("5. Polling for the processed document...")
        for _ in range(10):
            processed = client.get(f"document/{document_id}")
            if processed != 202 and processed.get("status") == "PROCESSED":
                print(f"   Sentiment score: {processed.get('sentiment_score')}")
                break
            time.sleep(1)
        else:
            print("   Document still processing, giving up")
        print()

        print("6. Cancelling a queued document...")
        try:
            client.delete(f"document/{uuid.uuid4()}")
        except SemantriaClientError as e:
            print(f"   Expected failure for unknown document: {e}")
        print()

        print("=== All Examples Completed Successfully! ===")

    except SemantriaClientError as e:
        print(f"Semantria Client Error: {e}")
        sys.exit(1)
    finally:
        # Clean up
        client.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    main(sys.argv[1] if len(sys.argv) > 1 else None)
