"""Client for the instance metadata service: VM id and AK certificate renewal."""

from __future__ import annotations

import urllib.parse

import requests

from .diagnostics import EventLevel, get_logger, report_event
from .imds_http import HttpClient, HttpVerb

__all__ = [
    "IMDS_ENDPOINT",
    "THIM_QUERY_API_VERSION",
    "VM_ID_API_VERSION",
    "ImdsClient",
    "url_encode",
    "vm_id_query_endpoint",
    "thim_ak_renew_endpoint",
    "thim_query_ak_endpoint",
]

IMDS_ENDPOINT = "http://169.254.169.254/metadata"
THIM_QUERY_API_VERSION = "2021-12-01"
VM_ID_API_VERSION = "2019-03-11"

_API_VERSION_PARAM = "api-version="
_VM_ID_PARAM = "vmId="
_REQUEST_ID_PARAM = "requestId="
_CERT_GUID_PARAM = "guid="

_AK_RENEW_PATH = "/THIM/tvm/certificate/renew"
_AK_QUERY_PATH = "/THIM/tvm/certificate/query"
_VM_ID_QUERY_PATH = "/instance/compute/vmId"
_FORMAT_TYPE = "format=text"


def url_encode(data: str) -> str:
    """Percent-encode every character except the URL-unreserved ones."""
    return urllib.parse.quote(data, safe="")


def vm_id_query_endpoint() -> str:
    """Return the metadata-service URL that yields the VM id as text."""
    url = (
        f"{IMDS_ENDPOINT}{_VM_ID_QUERY_PATH}?{_API_VERSION_PARAM}{VM_ID_API_VERSION}"
        f"&{_FORMAT_TYPE}"
    )
    get_logger().info("IMDS VM ID query url: %s", url)
    return url


def thim_ak_renew_endpoint(vm_id: str, request_id: str, api_version: str) -> str:
    """Return the URL used to ask for renewal of the AK certificate."""
    url = (
        f"{IMDS_ENDPOINT}{_AK_RENEW_PATH}?{_API_VERSION_PARAM}{api_version}"
        f"&{_VM_ID_PARAM}{vm_id}&{_REQUEST_ID_PARAM}{request_id}"
    )
    get_logger().info("AK renew url: %s", url)
    report_event("AKRenew Url", url, EventLevel.IMDS_RENEW_AK_URL)
    return url


def thim_query_ak_endpoint(vm_id: str, request_id: str, cert_query_guid: str) -> str:
    """Return the URL used to fetch a renewed AK certificate."""
    url = (
        f"{IMDS_ENDPOINT}{_AK_QUERY_PATH}?{_API_VERSION_PARAM}{THIM_QUERY_API_VERSION}"
        f"&{_VM_ID_PARAM}{vm_id}&{_REQUEST_ID_PARAM}{request_id}"
        f"&{_CERT_GUID_PARAM}{cert_query_guid}"
    )
    get_logger().info("AK query url: %s", url)
    return url


class ImdsClient:
    """Talks to the metadata service about the VM and its AK certificate.

    Invalid arguments raise ValueError; HTTP failures raise AttestationError.
    """

    def __init__(self, session: requests.Session | None = None) -> None:
        self._http = HttpClient(session)

    def _invoke(self, url: str, verb: HttpVerb, request_body: str = "") -> str:
        if not url:
            get_logger().error("The URL can not be empty")
            raise ValueError("URL must not be empty")
        response = self._http.invoke_imds_request(url, verb, request_body)
        get_logger().info("HTTP response retrieved: %s", response)
        return response

    def get_vm_id(self) -> str:
        """Return the VM id reported by the metadata service."""
        return self._invoke(vm_id_query_endpoint(), HttpVerb.GET)

    def renew_ak_cert(self, cert: str, vm_id: str, request_id: str, api_version: str) -> str:
        """Ask for renewal of ``cert``; return the guid used to query the new certificate."""
        if not cert or not vm_id or not request_id:
            get_logger().error("Invalid input parameter")
            report_event("AkRenew", "Invalid input parameter", EventLevel.IMDS_RENEW_AK)
            raise ValueError("certificate, VM id and request id must not be empty")

        url = thim_ak_renew_endpoint(vm_id, request_id, api_version)
        encoded_cert = url_encode(cert)
        get_logger().info("IMDS Ak renew request body: %s", encoded_cert)
        report_event("AkRenew", encoded_cert, EventLevel.IMDS_AKRENEW_REQUEST_BODY)
        return self._invoke(url, HttpVerb.POST, encoded_cert)

    def query_ak_cert(self, cert_query_guid: str, vm_id: str, request_id: str) -> str:
        """Return the renewed AK certificate as a PEM string."""
        if not cert_query_guid or not vm_id or not request_id:
            get_logger().error("Invalid input parameter")
            report_event("AkRenew", "Invalid input parameter", EventLevel.IMDS_QUERY_AK)
            raise ValueError("query guid, VM id and request id must not be empty")

        url = thim_query_ak_endpoint(vm_id, request_id, cert_query_guid)
        return self._invoke(url, HttpVerb.GET)