# =============================================================================
# core/flight_search.py  -  searchGoogleFlights: SerpApi Google Flights
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Turns a FlightSearchRequest into one GET against SerpApi's
#   search.json endpoint with engine=google_flights.
#
# VALIDATION FIRST:
#   This is the only tool with cross-field rules (FLIGHT_RULES).  They run
#   before the request is built; if any fails, the caller gets one error
#   listing every failed rule and nothing is sent.
#
# QUERY STRING:
#   engine, api_key, then type and async (the renamed flight_type and
#   async_search), then every other field under its own name, in the order
#   FlightSearchRequest declares them.  Absent fields are left out entirely,
#   never sent as "" or "null".
#
# RESPONSE:
#   SerpApi answers JSON; the tool re-serializes it pretty-printed so the
#   caller gets readable text.
# =============================================================================

import json
from dataclasses import fields
from typing import Optional

import httpx

from core.models import FlightSearchRequest, HttpRequestPlan
from core.translator import ClientFactory, QueryField, Translator, build_params
from core.validation import mutually_exclusive, required_when

FLIGHTS_URL = "https://serpapi.com/search.json"
ENGINE = "google_flights"

RENAMED = {
    "flight_type": "type",
    "async_search": "async",
}

FLIGHT_QUERY = (
    QueryField("api_key"),
    *(QueryField(attr, key) for attr, key in RENAMED.items()),
    *(
        QueryField(f.name)
        for f in fields(FlightSearchRequest)
        if f.name != "api_key" and f.name not in RENAMED
    ),
)

FLIGHT_RULES = (
    mutually_exclusive("exclude_airlines", "include_airlines"),
    mutually_exclusive("departure_token", "booking_token"),
    mutually_exclusive("no_cache", "async_search"),
    required_when("return_date", "flight_type", "1",
                  "return_date is required when flight_type is '1' (Round trip)."),
    required_when("multi_city_json", "flight_type", "3",
                  "multi_city_json is required when flight_type is '3' (Multi-city)."),
)


def build_flight_request(params: FlightSearchRequest, endpoint: str) -> HttpRequestPlan:
    query = [("engine", ENGINE)]
    query.extend(build_params(params, FLIGHT_QUERY))
    return HttpRequestPlan(method="GET", url=endpoint, params=query)


def pretty_json(response: httpx.Response) -> str:
    return json.dumps(response.json(), indent=2, ensure_ascii=False)


def flight_search_translator(
    endpoint: str = FLIGHTS_URL,
    client_factory: Optional[ClientFactory] = None,
) -> Translator[FlightSearchRequest]:
    return Translator(
        name="searchGoogleFlights",
        endpoint=endpoint,
        build=build_flight_request,
        rules=FLIGHT_RULES,
        render=pretty_json,
        upstream_message=(
            "Error fetching flight data from SerpApi: {status} {reason}. Details: {body}"
        ),
        transport_message="Failed to fetch flight data: {error}",
        client_factory=client_factory,
    )
