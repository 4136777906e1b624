from __future__ import annotations

GRAPH_HOST = "graph.facebook.com"
GRAPH_VIDEO_HOST = "graph-video.facebook.com"
GRAPH_BETA_HOST = "graph.beta.facebook.com"
GRAPH_VIDEO_BETA_HOST = "graph-video.beta.facebook.com"

LEGACY_REST_HOST = "api.facebook.com"
LEGACY_REST_READ_HOST = "api-read.facebook.com"
LEGACY_REST_VIDEO_HOST = "api-video.facebook.com"
LEGACY_REST_BETA_HOST = "api.beta.facebook.com"
LEGACY_REST_READ_BETA_HOST = "api-read.beta.facebook.com"
LEGACY_REST_VIDEO_BETA_HOST = "api-video.beta.facebook.com"

GRAPH_HOSTS = frozenset({GRAPH_HOST, GRAPH_VIDEO_HOST, GRAPH_BETA_HOST, GRAPH_VIDEO_BETA_HOST})

LEGACY_REST_HOSTS = frozenset(
    {
        LEGACY_REST_HOST,
        LEGACY_REST_READ_HOST,
        LEGACY_REST_VIDEO_HOST,
        LEGACY_REST_BETA_HOST,
        LEGACY_REST_READ_BETA_HOST,
        LEGACY_REST_VIDEO_BETA_HOST,
    }
)

VIDEO_UPLOAD_METHOD = "video.upload"

LEGACY_REST_READ_ONLY_CALLS = frozenset(
    {
        "admin.getallocation",
        "admin.getappproperties",
        "admin.getbannedusers",
        "admin.getlivestreamvialink",
        "admin.getmetrics",
        "admin.getrestrictioninfo",
        "application.getpublicinfo",
        "auth.getapppublickey",
        "auth.getsession",
        "auth.getsignedpublicsessiondata",
        "comments.get",
        "connect.getunconnectedfriendscount",
        "dashboard.getactivity",
        "dashboard.getcount",
        "dashboard.getglobalnews",
        "dashboard.getnews",
        "dashboard.multigetcount",
        "dashboard.multigetnews",
        "data.getcookies",
        "events.get",
        "events.getmembers",
        "fbml.getcustomtags",
        "feed.getappfriendstories",
        "feed.getregisteredtemplatebundlebyid",
        "feed.getregisteredtemplatebundles",
        "fql.multiquery",
        "fql.query",
        "friends.arefriends",
        "friends.get",
        "friends.getappusers",
        "friends.getlists",
        "friends.getmutualfriends",
        "gifts.get",
        "groups.get",
        "groups.getmembers",
        "intl.gettranslations",
        "links.get",
        "notes.get",
        "notifications.get",
        "pages.getinfo",
        "pages.isadmin",
        "pages.isappadded",
        "pages.isfan",
        "permissions.checkavailableapiaccess",
        "permissions.checkgrantedapiaccess",
        "photos.get",
        "photos.getalbums",
        "photos.gettags",
        "profile.getinfo",
        "profile.getinfooptions",
        "stream.get",
        "stream.getcomments",
        "stream.getfilters",
        "users.getinfo",
        "users.getloggedinuser",
        "users.getstandardinfo",
        "users.hasapppermission",
        "users.isappuser",
        "users.isverified",
        "video.getuploadlimits",
    }
)


def legacy_rest_host(method: str, use_beta: bool = False) -> str:
    if method == VIDEO_UPLOAD_METHOD:
        return LEGACY_REST_VIDEO_BETA_HOST if use_beta else LEGACY_REST_VIDEO_HOST
    if method.lower() in LEGACY_REST_READ_ONLY_CALLS:
        return LEGACY_REST_READ_BETA_HOST if use_beta else LEGACY_REST_READ_HOST
    return LEGACY_REST_BETA_HOST if use_beta else LEGACY_REST_HOST


def graph_host(http_method: str, path: str, use_beta: bool = False) -> str:
    if http_method == "POST" and path.endswith("/videos"):
        return GRAPH_VIDEO_BETA_HOST if use_beta else GRAPH_VIDEO_HOST
    return GRAPH_BETA_HOST if use_beta else GRAPH_HOST


__all__ = [
    "GRAPH_HOSTS",
    "LEGACY_REST_HOSTS",
    "LEGACY_REST_READ_ONLY_CALLS",
    "VIDEO_UPLOAD_METHOD",
    "graph_host",
    "legacy_rest_host",
]
