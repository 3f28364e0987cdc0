"""
SSO provider service package.

Implements one identity-provider integration for the authentication
gateway: who the user is, whether the access token is still valid, and
whether the user belongs to an allowed directory group.

- app.providers: profile resolution, group authorization, refresh
- app.adapters: HTTP clients for the SSO realm and the directory service
- app.models: session and directory records
- app.main: FastAPI surface driving the provider remotely

Importing the package performs no network calls; all IO happens inside
provider operations. Provider configuration is built once and never
mutated by requests.
"""
