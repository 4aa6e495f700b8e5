"""Vendor request envelope, request headers and the exported column schema."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping
from urllib.parse import urlparse

RESULT_BLOCK = "result"

SUPPLIER_COLUMNS: tuple[str, ...] = (
    "supplierName",
    "unifiedSocialCode",
    "updateDate",
    "domesticForeignRelation",
    "companyType",
    "licenceEndDate",
    "updateUserName",
    "updateUser",
    "institutionType",
    "createUserName",
    "supplierCode",
    "contactsName",
    "contactsMobilephone",
    "licenceFromDate",
    "addressDetail",
    "offlineSupplier",
    "contactsMail",
    "createUser",
    "internalCode",
    "contactsTelephone",
    "createDate",
)

_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/141.0.0.0 Safari/537.36"
)


def default_payload() -> dict[str, Any]:
    """Return the supplier query envelope with placeholder pagination."""

    filter_columns = [
        "supplierCode",
        "supplierName",
        "companyType",
        "offlineSupplier",
        "unifiedSocialCode",
        "aliveFlag",
    ]
    return {
        "serviceName": "PSRM01",
        "methodName": "querySupCm",
        "__context__": {},
        "__user__": {},
        "__version__": "2.0",
        "__sys__": {
            "name": "",
            "descName": "",
            "msg": "",
            "msgKey": "",
            "detailMsg": "",
            "status": 0,
            "traceId": "",
        },
        "__blocks__": {
            RESULT_BLOCK: {
                "meta": {"columns": []},
                "rows": [[]],
                "attr": {"limit": 10, "offset": 10, "showCount": "true"},
            },
            "inqu_status": {
                "meta": {
                    "desc": "",
                    "attr": {},
                    "columns": [
                        {"pos": pos, "name": name} for pos, name in enumerate(filter_columns)
                    ],
                },
                "rows": [["", "", "", "", "", "1"]],
                "attr": {},
            },
        },
    }


@dataclass(frozen=True)
class RequestTemplate:
    """Immutable query envelope; every page derives its own patched copy."""

    payload: Mapping[str, Any] = field(default_factory=default_payload)
    block: str = RESULT_BLOCK

    def __post_init__(self) -> None:
        frozen = MappingProxyType(copy.deepcopy(dict(self.payload)))
        object.__setattr__(self, "payload", frozen)

    @property
    def service_name(self) -> str:
        return str(self.payload.get("serviceName", ""))

    @property
    def method_name(self) -> str:
        return str(self.payload.get("methodName", ""))

    def for_page(self, limit: int, offset: int) -> dict[str, Any]:
        body = copy.deepcopy(dict(self.payload))
        blocks = body.setdefault("__blocks__", {})
        block = blocks.setdefault(self.block, {})
        attr = dict(block.get("attr") or {})
        attr["limit"] = limit
        attr["offset"] = offset
        block["attr"] = attr
        return body


def build_headers(access_token: str, base_url: str) -> dict[str, str]:
    """Headers the vendor portal expects, derived from the token and endpoint."""

    parsed = urlparse(base_url)
    origin = f"{parsed.scheme}://{parsed.netloc}"
    return {
        "ACCESS-No": access_token,
        "Access-Token": access_token,
        "sso_token": access_token,
        "Cookie": f"_tea_utm_cache_10000007=undefined; token={access_token}",
        "Accept": "application/json, text/plain, */*",
        "Accept-Language": "zh-CN,zh;q=0.9,en;q=0.8",
        "Content-Type": "application/json;charset=UTF-8",
        "DNT": "1",
        "Mk-Request": "1",
        "Origin": origin,
        "Referer": f"{origin}/cnnc-pm-web/",
        "Sec-Fetch-Dest": "empty",
        "Sec-Fetch-Mode": "cors",
        "Sec-Fetch-Site": "same-origin",
        "User-Agent": _USER_AGENT,
        "menuId": "PCPSAM26",
    }


__all__ = [
    "RESULT_BLOCK",
    "RequestTemplate",
    "SUPPLIER_COLUMNS",
    "build_headers",
    "default_payload",
]
