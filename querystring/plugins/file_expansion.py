"""
Expand a field matched against the contents of a file.

    src_ip:bad_ips.txt          => {"terms": {"src_ip": [...]}}
    src_ip:scans.csv[2]         => third column of the CSV
    user_agent:*agents.txt      => any of the lines as wildcards
    url:~patterns.dat           => any of the lines as regexps
    user:events.json[actor.id]  => values at a key path, one JSON document per line

Plain text files (.txt, .dat) skip blank lines and lines starting with
``#``. Columns are separated by tabs or NUL bytes and the column selector
defaults to the last column.
"""

import csv
import json
import os
import re
from typing import Any, Callable, Dict, List, Optional, Set

from loguru import logger

from es_types.tokens import TokenResult
from querystring.errors import FileExpansionError
from querystring.plugin import Plugin
from utils.query_builder import build_any_of_query, build_terms_query


FILE_TOKEN = re.compile(r"(.*\.(\w{3,4}))(?:\[([^\]]+)\])?$")
COLUMN_SPLIT = re.compile(r"[\t\0]")
MATCHER_PREFIXES = {"~": "regexp", "*": "wildcard"}


def _column(selector: Optional[str], file: str) -> int:
    if selector is None:
        return -1
    try:
        return int(selector)
    except ValueError:
        raise FileExpansionError(f"Column selector for {file} must be an integer, got: {selector}")


def _pick(columns: List[str], col: int) -> Optional[str]:
    try:
        return columns[col]
    except IndexError:
        return None


def parse_text_file(file: str, selector: Optional[str]) -> Set[Any]:
    col = _column(selector, file)
    values = set()
    with open(file, encoding="utf-8") as fh:
        for line in fh:
            line = line.rstrip("\r\n")
            if not line.strip() or line.startswith("#"):
                continue
            value = _pick(COLUMN_SPLIT.split(line), col)
            if value:
                values.add(value)
    return values


def parse_csv_file(file: str, selector: Optional[str]) -> Set[Any]:
    col = _column(selector, file)
    values = set()
    with open(file, encoding="utf-8", newline="") as fh:
        for record in csv.reader(fh):
            value = _pick(record, col)
            if value:
                values.add(value)
    return values


def parse_json_file(file: str, selector: Optional[str]) -> Set[Any]:
    if not selector:
        raise FileExpansionError(
            f"For newline delimited JSON, please specify the key, ie <field>:{file}[key.path.i.want]"
        )

    path = selector.split(".")
    values = set()
    with open(file, encoding="utf-8") as fh:
        for line_no, line in enumerate(fh, 1):
            if not line.strip():
                continue
            try:
                data = json.loads(line)
            except json.JSONDecodeError as e:
                logger.warning("Invalid JSON in {}, line {}: {}", file, line_no, e)
                continue

            for key in path:
                if not isinstance(data, dict) or key not in data:
                    break
                data = data[key]
            else:
                candidates = data if isinstance(data, list) else [data]
                values.update(
                    v for v in candidates
                    if v is not None and not isinstance(v, (dict, list))
                )

    if not values:
        raise FileExpansionError(f"Retrieved no values from {file} at key path {selector}")
    return values


PARSERS: Dict[str, Callable[[str, Optional[str]], Set[Any]]] = {
    "txt": parse_text_file,
    "dat": parse_text_file,
    "csv": parse_csv_file,
    "json": parse_json_file,
}


class FileExpansion(Plugin):
    priority = 5

    def expand(self, token: str) -> Optional[List[TokenResult]]:
        field, _, match = token.partition(":")
        if not field or not match:
            return None

        m = FILE_TOKEN.match(match)
        if not m:
            return None
        file, ext, selector = m.groups()

        matcher = MATCHER_PREFIXES.get(file[0], "terms")
        if matcher != "terms":
            file = file[1:]

        parser = PARSERS.get(ext.lower())
        if parser is None or not os.path.isfile(file):
            return None

        try:
            values = parser(file, selector)
        except OSError as e:
            logger.debug("{} - unable to read {}: {}", self.name, file, e)
            return None

        if not values:
            return None
        logger.info("# FILE:{}[{}] contained {} unique elements.", file, selector or "-1", len(values))

        uniq = sorted(values, key=str)
        if matcher == "terms":
            condition = build_terms_query(field, uniq)
        else:
            condition = build_any_of_query(matcher, field, uniq)
        return [TokenResult.from_condition(condition)]
