"""
Seed company records.
"""

from typing import List

from analyzers.models import CompanyProfile

SEED_COMPANIES = [
    {"id": 103, "name": "OpenKM", "website": "https://github.com/openkm"},
    {"id": 104, "name": "dotCMS", "website": "https://github.com/dotCMS"},
    {"id": 105, "name": "Databricks", "website": "https://github.com/databricks"},
    {"id": 106, "name": "Confluent", "website": "https://github.com/confluentinc"},
    {"id": 107, "name": "Elastic", "website": "https://github.com/elastic/"},
    {"id": 108, "name": "Hashicorp", "website": "https://github.com/hashicorp"},
    {"id": 109, "name": "Akka", "website": "https://github.com/akka"},
    {"id": 110, "name": "camunda", "website": "https://github.com/camunda"},
    {"id": 111, "name": "Graylog", "website": "https://github.com/Graylog2"},
]


def seed_companies() -> List[CompanyProfile]:
    return [CompanyProfile(**company) for company in SEED_COMPANIES]
