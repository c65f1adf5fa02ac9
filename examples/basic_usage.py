"""
Supauth Python SDK - Basic Usage Example

This example demonstrates the basic usage of the Supauth Python SDK.
"""

import logging

from supauth import (
    Auth,
    SupauthConfig,
    UserCredentials,
    Authenticated,
    SupauthError,
    TransportError,
)


def main():
    """Sign up, sign in, refresh and sign out."""
    logging.basicConfig(level=logging.DEBUG)

    auth = Auth(SupauthConfig(
        project_id="your-project-ref",
        api_key="your-anon-key",
        debug=True,
    ))

    credentials = UserCredentials(
        email="user@example.com",
        password="SecurePassword123!",
    )

    try:
        response = auth.sign_up(credentials)
        if response.ok:
            print(f"Signed up: {response.data.email}")
        else:
            print(f"Sign up rejected ({response.status}): {response.error.message}")

        response = auth.sign_in(credentials)
        if not response.ok:
            print(f"Sign in rejected: {response.error.error_code}")
            return

        session: Authenticated = response.data
        print(f"Signed in, token expires in {session.expires_in}s")

        response = auth.refresh_token(session.refresh_token)
        if response.ok:
            session = response.data

        auth.sign_out(session.access_token)
        print("Signed out")
    except TransportError as e:
        print(f"Network error (expected without real API): {e.message}")
    except SupauthError as e:
        print(f"Client error: {e!r}")
    finally:
        auth.close()


if __name__ == "__main__":
    main()
