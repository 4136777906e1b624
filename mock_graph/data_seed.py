from __future__ import annotations

from typing import Any, Dict, List

VALID_TOKEN = "VALID_TOKEN"
APP_ID = "123456"
APP_SECRET = "s3cr3t"
OAUTH_CODE = "AUTH_CODE"
ISSUED_TOKEN = "ISSUED|TOKEN"
ISSUED_EXPIRES = 5183999


def _generate_posts(user_id: str, count: int) -> List[Dict[str, Any]]:
    posts: List[Dict[str, Any]] = []
    for i in range(count):
        posts.append(
            {
                "id": f"{user_id}_{100 + i}",
                "message": f"post {i}",
                "created_time": f"2011-01-{i + 1:02d}T10:00:00+0000",
            }
        )
    return posts


def generate_seed() -> Dict[str, Any]:
    users = {
        "4": {
            "id": "4",
            "name": "Mark Zuckerberg",
            "first_name": "Mark",
            "last_name": "Zuckerberg",
            "username": "zuck",
        },
        "5": {
            "id": "5",
            "name": "Chris Hughes",
            "first_name": "Chris",
            "last_name": "Hughes",
            "username": "ChrisHughes",
        },
    }
    return {
        "tokens": {VALID_TOKEN: "4", f"{APP_ID}|{APP_SECRET}": None},
        "users": users,
        "feed": {"4": _generate_posts("4", 5), "5": _generate_posts("5", 2)},
    }
