"""
SQL model extraction using sqlglot.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import sqlglot
from sqlglot import exp
from sqlglot.errors import SqlglotError

from sqldoc.models.project import ColumnReflection, ModelReflection
from sqldoc.shared.exceptions import ConversionError

# Configure logging
logger = logging.getLogger(__name__)

DOCUMENTED_CREATE_KINDS = {"TABLE", "VIEW"}


@dataclass
class ParsedFile:
    """Models found in one SQL file plus anything worth reporting."""

    models: list[ModelReflection] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


class SQLParser:
    """Turns the statements of a SQL file into model reflections."""

    def __init__(self, dialect: str | None = None) -> None:
        self.dialect = dialect

    def parse(self, content: str, file_path: str) -> ParsedFile:
        """
        Parse SQL content and extract the models it defines.

        ``CREATE TABLE`` and ``CREATE VIEW`` statements each define a model
        named after the created table. A bare query defines one model named
        after the file (``<folder>.<stem>``); only the first bare query of a
        file is used.

        Args:
            content: The SQL content to parse
            file_path: Path of the file, used for naming and reporting

        Returns:
            ParsedFile with the models, warnings and skipped statement kinds

        Raises:
            ConversionError: If sqlglot cannot parse the content or the parsed
                statements cannot be turned into models
        """
        try:
            statements = sqlglot.parse(content, read=self.dialect)
        except SqlglotError as e:
            raise self._conversion_error(e) from e
        except Exception as e:
            raise ConversionError(f"SQL parsing error: {type(e).__name__}: {e}") from e

        try:
            return self._extract_models(statements, content, file_path)
        except Exception as e:
            raise ConversionError(f"Failed to extract models: {type(e).__name__}: {e}") from e

    def _extract_models(
        self, statements: list[exp.Expression | None], content: str, file_path: str
    ) -> ParsedFile:
        result = ParsedFile()
        description = extract_description(content)
        query_seen = False

        for statement in statements:
            if statement is None:
                continue

            if isinstance(statement, exp.Create):
                model = self._model_from_create(statement, file_path, description)
                if model is None:
                    result.skipped.append(self._statement_label(statement))
                    continue
                result.models.append(model)
            elif isinstance(statement, exp.Query):
                if query_seen:
                    result.warnings.append(
                        "Only the first query of a file is documented; ignoring the others."
                    )
                    continue
                query_seen = True
                result.models.append(self._model_from_query(statement, file_path, description))
            else:
                result.skipped.append(self._statement_label(statement))

        if not result.models:
            result.warnings.append("No CREATE TABLE, CREATE VIEW or query statement found.")

        logger.debug(f"Parsed {len(result.models)} models from {file_path}")
        return result

    def _model_from_create(
        self, statement: exp.Create, file_path: str, description: str | None
    ) -> ModelReflection | None:
        kind = str(statement.args.get("kind") or "").upper()
        if kind not in DOCUMENTED_CREATE_KINDS:
            return None

        target = statement.this
        columns: list[ColumnReflection] = []
        if isinstance(target, exp.Schema):
            columns = [
                ColumnReflection(name=column.name, datatype=self._sql(column.args.get("kind")))
                for column in target.expressions
                if isinstance(column, exp.ColumnDef)
            ]
            target = target.this
        if not isinstance(target, exp.Table) or not target.name:
            return None

        query = statement.expression
        if isinstance(query, exp.Query):
            if not columns:
                columns = self._query_columns(query)
            sources = self._source_tables(query)
        else:
            sources = []

        return ModelReflection(
            name=qualified_name(target),
            table=target.name,
            schema=target.db or None,
            kind=kind.lower(),
            file_path=file_path,
            description=description,
            columns=columns,
            sources=sources,
            sql=self._sql(statement, pretty=True),
        )

    def _model_from_query(
        self, query: exp.Query, file_path: str, description: str | None
    ) -> ModelReflection:
        path = Path(file_path)
        schema = path.parent.name or None
        return ModelReflection(
            name=f"{schema}.{path.stem}" if schema else path.stem,
            table=path.stem,
            schema=schema,
            kind="query",
            file_path=file_path,
            description=description,
            columns=self._query_columns(query),
            sources=self._source_tables(query),
            sql=self._sql(query, pretty=True),
        )

    def _query_columns(self, query: exp.Query) -> list[ColumnReflection]:
        columns = []
        for projection in query.selects:
            name = projection.alias_or_name or self._sql(projection)
            inner = projection.unalias()
            datatype = self._sql(inner.to) if isinstance(inner, exp.Cast) else ""
            columns.append(ColumnReflection(name=name, datatype=datatype))
        return columns

    def _source_tables(self, query: exp.Expression) -> list[str]:
        """Tables read by ``query``, excluding references to its own CTEs."""
        cte_names = {cte.alias_or_name for cte in query.find_all(exp.CTE)}
        sources = []
        for table in query.find_all(exp.Table):
            if not table.name:
                continue
            if not table.db and table.name in cte_names:
                continue
            sources.append(qualified_name(table))

        # Remove duplicates while preserving order
        return list(dict.fromkeys(sources))

    def _sql(self, node: exp.Expression | None, pretty: bool = False) -> str:
        if node is None:
            return ""
        return node.sql(dialect=self.dialect, pretty=pretty)

    @staticmethod
    def _statement_label(statement: exp.Expression) -> str:
        kind = statement.args.get("kind")
        label = statement.key.upper()
        return f"{label} {str(kind).upper()}" if kind else label

    @staticmethod
    def _conversion_error(error: SqlglotError) -> ConversionError:
        details = getattr(error, "errors", None) or []
        if details:
            first = details[0]
            return ConversionError(
                f"SQL parsing error: {first.get('description') or error}",
                line=first.get("line"),
            )
        return ConversionError(f"SQL parsing error: {error}")


def qualified_name(table: exp.Table) -> str:
    """Return ``catalog.db.name`` with the empty parts left out."""
    return ".".join(part for part in (table.catalog, table.db, table.name) if part)


def extract_description(content: str) -> str | None:
    """
    Return the block of ``--`` comment lines at the top of a SQL file.

    Leading blank lines are skipped; the block ends at the first blank or
    non-comment line.
    """
    lines: list[str] = []
    for raw_line in content.splitlines():
        line = raw_line.strip()
        if not line:
            if lines:
                break
            continue
        if not line.startswith("--"):
            break
        lines.append(line[2:].strip())
    description = "\n".join(lines).strip()
    return description or None
