"""Bind a matched route's parameters onto the request."""

from urllib.parse import unquote

from perch.http.request import Request
from perch.http.url import RequestURL
from perch.manifest import RouteDescriptor
from perch.routing.matcher import match_route


def augment_request(request: Request, descriptor: RouteDescriptor) -> dict[str, str]:
    """Merge the route's captures into the request and return them.

    Each capture listed in ``route_keys`` is written to ``request.query``
    under its public name, percent-decoded, replacing any value the client
    sent. Matching itself runs against the still-encoded path. The request's
    ``route_url`` is then set to a URL carrying the merged query string.

    Returns the params mapping (public name -> captured value).
    """
    url = RequestURL.parse(request.url)
    captures = match_route(descriptor, url.path) or {}

    params: dict[str, str] = {}
    for group, name in descriptor.route_keys.items():
        value = captures.get(group)
        if value is None:
            continue
        value = unquote(value)
        request.query.set(name, value)
        params[name] = value

    request.route_url = url.with_params(request.query)
    return params
