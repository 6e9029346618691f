"""
Log in a character through the EVE SSO from the terminal.

You'll need to set the EVE_CLIENT_ID environment variable, and optionally
EVE_CALLBACK_URL and EVE_SCOPES (space separated).

Register an application: https://developers.eveonline.com
"""

import asyncio
import logging
import os

from dotenv import load_dotenv

from evesso.sso_client import SsoProvider


async def main() -> None:
    client_id = os.getenv("EVE_CLIENT_ID")
    if not client_id:
        raise SystemExit("EVE_CLIENT_ID is not set")
    callback_url = os.getenv("EVE_CALLBACK_URL", "http://localhost:8080/callback")
    scopes = os.getenv("EVE_SCOPES", "publicData").split()

    async with SsoProvider(client_id) as sso:
        login = sso.get_login(callback_url, scopes)
        print(f"Open this URL and log in:\n\n{login.url}\n")

        redirect_url = input("Paste the URL you were redirected to: ").strip()
        result = await sso.handle_callback(redirect_url, login.state, login.clear_code)

    logging.info(f"Scopes: {result.scopes}")
    print(f"Logged in as {result.character_name} ({result.character_id})")
    print(f"Access token expires in {result.expires_in} seconds")


if __name__ == "__main__":
    load_dotenv()
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
