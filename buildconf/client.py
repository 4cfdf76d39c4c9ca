"""
client.py

Responsibility: Map build-configuration operations onto REST endpoints.

Every method is a synchronous call over the injected `Transport`; the client holds
no state of its own, so one instance can be shared freely.
"""

from __future__ import annotations

import logging
from typing import IO

from buildconf.models import BuildConfig, BuildConfigVersion, UploadTarget
from buildconf.transport import Transport

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1/packer/build-configurations"


class BuildConfigClient:
    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    def get_build_config(self, user: str, name: str) -> BuildConfig:
        """
        Fetch a single build configuration by user and name.
        """
        r = self._transport.request("GET", f"{API_PREFIX}/{user}/{name}")
        return BuildConfig.from_wire(self._transport.decode_json(r))

    def create_build_config(self, user: str, name: str) -> None:
        """
        Create a new build configuration. The response body is ignored.
        """
        bc = BuildConfig(user=user, name=name)
        self._transport.request("POST", API_PREFIX, json_body=bc.to_create_body())
        logger.debug("Created build configuration %s/%s", user, name)

    def create_build_config_version(self, version: BuildConfigVersion) -> UploadTarget:
        """
        Create the version record and return where its template must be uploaded.
        """
        r = self._transport.request(
            "POST",
            f"{API_PREFIX}/{version.user}/{version.name}/versions",
            json_body=version.to_create_body(),
        )
        return UploadTarget.from_wire(self._transport.decode_json(r))

    def upload_template(self, target: UploadTarget, payload: IO[bytes], size: int) -> None:
        self._transport.put_file(target.upload_path, payload, size)

    def upload_build_config_version(
        self,
        version: BuildConfigVersion,
        payload: IO[bytes],
        size: int,
    ) -> UploadTarget:
        """
        Create a version and upload the template associated with it.

        Not atomic: if the upload fails, UploadError is raised and the version
        record already exists server-side without a payload.
        """
        target = self.create_build_config_version(version)
        logger.debug("Created version for %s/%s, uploading %d bytes", version.user, version.name, size)
        self.upload_template(target, payload, size)
        return target
