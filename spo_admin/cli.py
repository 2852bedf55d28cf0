"""
Command line entry point for managing the SharePoint apps service principal.
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Any, List, Optional

from pydantic import BaseModel

from spo_admin.admin import ServicePrincipal, ServicePrincipalClient
from spo_admin.auth import AuthenticationProvider, X509CertificateAuthenticationProvider
from spo_admin.config import Settings, VanityUrlOptions, get_settings
from spo_admin.exceptions import SpoAdminError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="spo-admin",
        description="Manage the SharePoint Online Client Extensibility service principal",
    )
    parser.add_argument("--site-url", help="Any site URL of the tenant")
    parser.add_argument("--admin-url", help="Tenant admin center URL (vanity domains)")

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("requests", help="List pending permission requests")

    approve = commands.add_parser("approve", help="Approve a permission request")
    approve.add_argument("id")
    deny = commands.add_parser("deny", help="Deny a permission request")
    deny.add_argument("id")

    commands.add_parser("enable", help="Enable the service principal")
    commands.add_parser("disable", help="Disable the service principal")
    commands.add_parser("grants", help="List granted permissions")

    add_grant = commands.add_parser("add-grant", help="Grant a scope on a resource")
    add_grant.add_argument("resource", help="Resource display name, e.g. 'Microsoft Graph'")
    add_grant.add_argument("scope", help="Scope, e.g. User.ReadBasic.All")

    revoke_grant = commands.add_parser("revoke-grant", help="Remove a scope from a grant")
    revoke_grant.add_argument("grant_id")
    revoke_grant.add_argument("scope")

    delete_grant = commands.add_parser("delete-grant", help="Delete a grant with all scopes")
    delete_grant.add_argument("grant_id")

    token = commands.add_parser("token", help="Print an access token for a resource")
    token.add_argument("resource", help="Resource URL, e.g. https://contoso.sharepoint.com")
    token.add_argument("--scope", action="append", dest="scopes", help="Explicit scope")

    return parser


def _to_jsonable(result: Any) -> Any:
    if isinstance(result, BaseModel):
        return result.model_dump(mode="json")
    if isinstance(result, list):
        return [_to_jsonable(item) for item in result]
    return result


async def run_command(
    args: argparse.Namespace,
    service_principal: ServicePrincipal,
    provider: AuthenticationProvider,
) -> Any:
    """Execute the parsed command and return its result."""
    vanity = VanityUrlOptions(admin_uri=args.admin_url) if args.admin_url else None

    if args.command == "requests":
        return await service_principal.get_permission_requests2(vanity)
    if args.command == "approve":
        return await service_principal.approve_permission_request2(args.id, vanity)
    if args.command == "deny":
        await service_principal.deny_permission_request2(args.id, vanity)
        return {"denied": args.id}
    if args.command == "enable":
        return await service_principal.enable2(vanity)
    if args.command == "disable":
        return await service_principal.disable2(vanity)
    if args.command == "grants":
        return await service_principal.list_grants2(vanity)
    if args.command == "add-grant":
        return await service_principal.add_grant2(args.resource, args.scope, vanity)
    if args.command == "revoke-grant":
        return await service_principal.revoke_grant2(args.grant_id, args.scope, vanity)
    if args.command == "delete-grant":
        await service_principal.delete_grant2(args.grant_id, vanity)
        return {"deleted": args.grant_id}
    if args.command == "token":
        if args.scopes:
            return await provider.get_access_token_for_scopes(args.resource, args.scopes)
        return await provider.get_access_token(args.resource)
    raise ValueError(f"Unknown command {args.command}")


async def _main(args: argparse.Namespace, settings: Settings) -> Any:
    provider = X509CertificateAuthenticationProvider.from_settings(settings)
    async with ServicePrincipalClient(provider, args.site_url, settings=settings) as client:
        return await run_command(args, client, provider)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()

    # Configure logging
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        result = asyncio.run(_main(args, settings))
    except SpoAdminError as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(_to_jsonable(result), indent=2))
    return 0
