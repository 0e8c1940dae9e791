"""
Company Record Storage Module.

Key-value storage of company records keyed by company id. Each record holds the
profile fields plus the pipeline outputs (``scraped_data``, ``nice_data``,
``email``). Stages read a whole record and write back a partial field set.
"""

from abc import ABC, abstractmethod
import json
import os
from pathlib import Path
from typing import Any, Dict, List

from config import logger
from errors import CompanyNotFound
from analyzers.models import CompanyProfile

UPDATABLE_FIELDS = {"scraped_data", "nice_data", "email"}


class CompanyStore(ABC):
    """Record store contract used by the pipeline stages."""

    @abstractmethod
    def get_company(self, company_id: int) -> CompanyProfile:
        """
        Read one company record.

        Raises:
            CompanyNotFound: If no record exists for the id
        """

    @abstractmethod
    def update_company(self, company_id: int, fields: Dict[str, Any]) -> CompanyProfile:
        """
        Replace a subset of the pipeline output fields of a record.

        Raises:
            CompanyNotFound: If no record exists for the id
            ValueError: If a field is not one of the pipeline output fields
        """

    @abstractmethod
    def insert_companies(self, companies: List[CompanyProfile]) -> int:
        """Insert new records, skipping ids that already exist. Returns the count inserted."""


class JsonCompanyStore(CompanyStore):
    """
    Stores every company record as a JSON document in a data directory.
    """

    def __init__(self, data_dir: str):
        """Initialize the company record store.

        Args:
            data_dir (str): Directory holding one JSON file per company.
        """
        self.storage_dir = Path(data_dir)
        self.storage_dir.mkdir(parents=True, exist_ok=True)

    def _get_company_file_path(self, company_id: int) -> str:
        return os.path.join(self.storage_dir, f"company_{int(company_id)}.json")

    def _write(self, company: CompanyProfile) -> None:
        file_path = self._get_company_file_path(company.id)
        tmp_path = f"{file_path}.tmp"
        with open(tmp_path, "w") as f:
            json.dump(company.model_dump(mode="json"), f, indent=2)
        os.replace(tmp_path, file_path)

    def get_company(self, company_id: int) -> CompanyProfile:
        file_path = self._get_company_file_path(company_id)
        if not os.path.exists(file_path):
            raise CompanyNotFound(f"No company record for id {company_id}")

        try:
            with open(file_path, "r") as f:
                return CompanyProfile.model_validate(json.load(f))
        except Exception as e:
            logger.error(
                {
                    "message": "Failed to load company record",
                    "company_id": company_id,
                    "file": file_path,
                    "error": str(e),
                }
            )
            raise

    def update_company(self, company_id: int, fields: Dict[str, Any]) -> CompanyProfile:
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

        company = self.get_company(company_id)
        try:
            updated = CompanyProfile.model_validate(
                {**company.model_dump(mode="json"), **fields}
            )
            self._write(updated)
        except Exception as e:
            logger.error(
                {
                    "message": "Failed to update company record",
                    "company_id": company_id,
                    "fields": sorted(fields),
                    "error": str(e),
                }
            )
            raise

        logger.info(
            {
                "message": "Company record updated",
                "company_id": company_id,
                "fields": sorted(fields),
            }
        )
        return updated

    def insert_companies(self, companies: List[CompanyProfile]) -> int:
        inserted = 0
        for company in companies:
            if os.path.exists(self._get_company_file_path(company.id)):
                logger.warning(
                    {
                        "message": "Company record already exists, skipping",
                        "company_id": company.id,
                    }
                )
                continue
            self._write(company)
            inserted += 1

        logger.info({"message": "Inserted company records", "count": inserted})
        return inserted
