from identity import issue_token

ADMIN_EMAIL = "admin@x.com"
MANAGER_EMAIL = "a@x.com"
USER_EMAIL = "u@x.com"


def auth_headers(email: str) -> dict:
    return {"Authorization": f"Bearer {issue_token({'email': email})}"}
