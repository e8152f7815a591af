#!/usr/bin/env python3
"""
Simple example of using blobprompt as a library.
"""
import logging
import os
import sys

from blobprompt import BlobClient, BlobPromptError, CompletionClient, PromptPipeline, Settings


def main():
    """
    Demonstrate the pipeline without the CLI wrapper.

    This example shows how to:
    1. Resolve settings from the environment
    2. Open a blob client against a local light node
    3. Run one submit -> fetch -> complete cycle
    """
    logging.basicConfig(level=logging.INFO)

    node_url = os.environ.get("NODE_URL", "http://localhost:26658")
    namespace = os.environ.get("NAMESPACE", "0102030405060708090a")
    prompt = " ".join(sys.argv[1:]) or "What is data availability sampling?"

    try:
        settings = Settings.from_env()
        completion = CompletionClient(settings)
        with BlobClient(node_url, timeout=settings.timeout, explorer_url=settings.explorer_url) as client:
            result = PromptPipeline(client, completion).run(namespace, prompt)
    except BlobPromptError as e:
        print(f"ERROR: {e}")
        return e.exit_code

    print(f"Included at height {result.height}: {result.explorer_link}")
    print(f"Commitment: {result.commitment_hex}")
    print(result.response)
    return 0


if __name__ == "__main__":
    sys.exit(main())
