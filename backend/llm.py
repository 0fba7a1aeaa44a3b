from google import genai

import config


def get_client() -> genai.Client:
    """Build a Gemini client from config.

    Construction is deferred to call time so that a missing credential
    surfaces inside the calling client's error handling.
    """
    return genai.Client(
        api_key=config.GEMINI_API_KEY or None,
        http_options={"timeout": config.LLM_TIMEOUT_SECONDS * 1000},
    )
