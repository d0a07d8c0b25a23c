import logging
import os
from datetime import datetime, timezone

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, status
from fastapi.responses import ORJSONResponse

from .core.constants import ROSTER_CACHE_TTL
from .core.errors import ConfigurationError, UnknownParserError, UntisParserError
from .core.registry import PARSERS, get_parser
from .models.api_models import ParseRequest, ParseResponse, ParserListResponse
from .models.models import ParserConfig

# Load environment variables from a .env file in the working directory or a parent
load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
ROSTER_TTL = int(os.getenv("ROSTER_CACHE_TTL", ROSTER_CACHE_TTL))

# Replaces the default configuration installed when the parser modules are imported
logging.basicConfig(level=getattr(logging, LOG_LEVEL, logging.INFO), format='[%(asctime)s] %(levelname)s - %(name)s - %(message)s', force=True)
log = logging.getLogger(__name__)

app = FastAPI(
    title="Untis Substitution API",
    description="API for converting Untis substitution tables into normalized substitution records.",
    version="0.1.0",
    default_response_class=ORJSONResponse,
)


@app.get("/")
async def read_root():
    """
    Root endpoint for the Untis Substitution API.
    Returns a simple message indicating the API is running.
    """
    return {"message": "Untis Substitution API is running"}


@app.get("/parsers", response_model=ParserListResponse, tags=["Parsing"])
async def list_parsers():
    """Lists the keys of all registered site adapters."""
    return ParserListResponse(parsers=sorted(PARSERS))


@app.post(
    "/parse",
    response_model=ParseResponse,
    summary="Parse a fetched Untis page",
    tags=["Parsing"],
)
def parse_page(request: ParseRequest):
    """
    Parses the HTML of one Untis page with the site adapter named in the request.

    Raises:
        HTTPException 404: The site adapter is unknown.
        HTTPException 422: The schedule configuration is invalid.
        HTTPException 400: The page could not be parsed.
    """
    log.info(f"Parse request for '{request.api}' ({len(request.html)} characters of HTML).")
    try:
        config = ParserConfig.from_data(request.data)
        parser = get_parser(request.api, config, roster_ttl=ROSTER_TTL)
        schedule = parser.get_substitution_schedule(request.html, default_class=request.default_class)
    except UnknownParserError as e:
        log.warning(f"Unknown parser requested: {e}")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ConfigurationError as e:
        log.warning(f"Invalid configuration for '{request.api}': {e}")
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    except UntisParserError as e:
        log.error(f"Failed to parse page for '{request.api}': {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    substitution_count = sum(len(day.substitutions) for day in schedule.days)
    log.info(f"Parsed {len(schedule.days)} day(s) with {substitution_count} substitutions.")
    return ParseResponse(schedule=schedule, parsed_at=datetime.now(timezone.utc))
