"""BizLaunch360 backend: AI helpers and record storage for small businesses.

Architecture Overview
=====================

Every AI feature is a stateless prompt handler: validate the JSON body, fill
in a prompt template, make exactly one chat completion call, and reshape the
answer for the dashboard.

1. **Buffered handlers** (customer messaging, financial forecast, marketing
   ideas, task suggestions, appointment reminders, business plan) call the
   hosted LLM gateway and return JSON.  Structured answers are pulled out of
   free-form model text by ``extract_json``.

2. **Streaming handlers** (generate-content, streaming-chat) relay the
   gateway's server-sent event stream to the client byte for byte.

3. **Business assistant** talks to OpenAI through ``langchain-openai``; the
   client carries the conversation and sends it back on every turn.

Key Design Decisions
--------------------
- **No retries**: one request is one billed completion.  Upstream 429 and
  402 surface to the client as 429 and 402.
- **Lazy secrets**: keys are resolved per call (env, then SSM on AWS), so a
  missing key fails only the requests that need it.
- **Explicit storage session**: every storage call receives the
  ``StorageSession`` built from the caller's bearer token; row-level
  security on the database scopes the data.
- **Uniform errors**: every error body is ``{"error": "..."}`` and every
  response carries the CORS headers.

Package Structure
-----------------
- ``bizlaunch/config.py`` - Centralized configuration from environment variables
- ``bizlaunch/prompts.py`` - System prompts, prompt builders, type enums
- ``bizlaunch/extraction.py`` - JSON extraction from model output
- ``bizlaunch/server.py`` - FastAPI application
- ``bizlaunch/main.py`` - CLI chat with the business assistant
- ``bizlaunch/services/`` - LLM gateway, OpenAI assistant, e-mail, metrics
- ``bizlaunch/storage/`` - Appointment, service and business plan adapters
- ``bizlaunch/api/`` - FastAPI routes and Pydantic schemas
"""
