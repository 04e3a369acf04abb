"""Reconcile table specifications against the live schema.

For each table the reconciler decides whether to create it, leave it alone,
or alter it, then executes the DDL through the context's ``DatabaseClient``.
All statements for a table are rendered before the first one is sent.

Reconcile calls never raise for library errors: failures come back as a
``ReconcileResult`` with outcome ``FAILED`` and the error attached.

Usage:
    from sqlow.schema.reconciler import SchemaReconciler

    reconciler = SchemaReconciler(context)
    result = await reconciler.add_or_pass(users)
    # result.outcome -> ReconcileOutcome.ADDED on first run, UNCHANGED after

    result = await reconciler.add_or_update(users, previous_name="accounts")
    for statement in result.statements:
        print(statement)
"""

import logging
from collections.abc import Mapping, Sequence

from sqlow.errors import QueryFailure, SqlowError
from sqlow.schema.context import SchemaContext, require_context
from sqlow.schema.introspector import SchemaIntrospector
from sqlow.schema.models import ReconcileOutcome, ReconcileResult
from sqlow.schema.table import TableSpec

logger = logging.getLogger(__name__)


class SchemaReconciler:
    """Applies ADD / PASS / UPDATE decisions for table specifications.

    Args:
        context: Connected ``SchemaContext`` (offline contexts are rejected).

    Raises:
        SchemaUninitialized: If ``context`` is missing or has no client.
    """

    def __init__(self, context: SchemaContext | None):
        self._context = require_context(context, connected=True)
        self._introspector = SchemaIntrospector(self._context.client)

    @property
    def context(self) -> SchemaContext:
        return self._context

    async def _execute(self, statements: list[str]) -> None:
        for sql in statements:
            logger.debug(f"Executing: {sql}")
            try:
                await self._context.client.execute(sql)
            except Exception as e:
                raise QueryFailure(
                    "DDL statement failed",
                    details={"sql": sql},
                    cause=e,
                ) from e

    async def _create(self, table: TableSpec, dry_run: bool) -> ReconcileResult:
        statement = table.render(self._context)
        if dry_run:
            logger.info(f"Table {table.name}: would create (dry run)")
        else:
            await self._execute([statement])
            logger.info(f"Table {table.name}: created")
        return ReconcileResult(
            table=table.name,
            outcome=ReconcileOutcome.ADDED,
            statements=[statement],
            dry_run=dry_run,
        )

    def _failed(self, table: TableSpec, error: SqlowError, dry_run: bool) -> ReconcileResult:
        logger.error(f"Table {table.name}: {error}")
        return ReconcileResult(
            table=table.name,
            outcome=ReconcileOutcome.FAILED,
            error=error,
            dry_run=dry_run,
        )

    async def add_or_pass(self, table: TableSpec, dry_run: bool = False) -> ReconcileResult:
        """Create the table if it does not exist; otherwise do nothing.

        Args:
            table: Desired table specification.
            dry_run: Render but do not execute.

        Returns:
            ``ReconcileResult`` with outcome ADDED, UNCHANGED or FAILED.
        """
        schema_name = self._context.schema_name
        try:
            if await self._introspector.table_exists(schema_name, table.name):
                logger.info(f"Table {table.name}: exists, nothing to do")
                return ReconcileResult(
                    table=table.name,
                    outcome=ReconcileOutcome.UNCHANGED,
                    dry_run=dry_run,
                )
            return await self._create(table, dry_run)
        except SqlowError as e:
            return self._failed(table, e, dry_run)

    async def add_or_update(
        self,
        table: TableSpec,
        previous_name: str | None = None,
        allow_drop: bool = False,
        dry_run: bool = False,
    ) -> ReconcileResult:
        """Create the table, or rename/alter the live table to match.

        The live table is looked up under ``previous_name`` first and then
        under ``table.name`` (a rename that already happened).  If neither
        exists the table is created.

        Args:
            table: Desired table specification.
            previous_name: Live name when the table is being renamed.
            allow_drop: Drop live columns missing from ``table``.
            dry_run: Build statements but do not execute.

        Returns:
            ``ReconcileResult`` with outcome ADDED, UNCHANGED, UPDATED or
            FAILED.  ``diff`` is set when the table existed.
        """
        schema_name = self._context.schema_name
        candidates = [table.name]
        if previous_name and previous_name != table.name:
            candidates.insert(0, previous_name)

        try:
            live_name = None
            for name in candidates:
                if await self._introspector.table_exists(schema_name, name):
                    live_name = name
                    break

            if live_name is None:
                return await self._create(table, dry_run)

            plan = await table.to_update(live_name).build(self._context, allow_drop=allow_drop)
            for column in plan.kept_columns:
                logger.warning(
                    f"Table {table.name}: column '{column}' is not in the definition "
                    f"and was kept (drops not allowed)"
                )

            if not plan.has_changes:
                logger.info(f"Table {table.name}: up to date")
                return ReconcileResult(
                    table=table.name,
                    outcome=ReconcileOutcome.UNCHANGED,
                    diff=plan.diff,
                    dry_run=dry_run,
                )

            if dry_run:
                logger.info(
                    f"Table {table.name}: would apply {len(plan.statements)} statement(s) (dry run)"
                )
            else:
                await self._execute(plan.statements)
                logger.info(f"Table {table.name}: updated ({len(plan.statements)} statement(s))")

            return ReconcileResult(
                table=table.name,
                outcome=ReconcileOutcome.UPDATED,
                statements=plan.statements,
                diff=plan.diff,
                dry_run=dry_run,
            )
        except SqlowError as e:
            return self._failed(table, e, dry_run)

    async def reconcile_all(
        self,
        tables: Sequence[TableSpec],
        update: bool = False,
        renames: Mapping[str, str] | None = None,
        allow_drop: bool = False,
        dry_run: bool = False,
    ) -> list[ReconcileResult]:
        """Reconcile tables in order, one result per table.

        A failure on one table does not stop the others.

        Args:
            tables: Table specifications, in creation order.
            update: Use ``add_or_update`` instead of ``add_or_pass``.
            renames: Map of desired table name to previous live name.
            allow_drop: Passed to ``add_or_update``.
            dry_run: Build statements but do not execute.
        """
        renames = renames or {}
        results: list[ReconcileResult] = []
        for table in tables:
            if update:
                result = await self.add_or_update(
                    table,
                    previous_name=renames.get(table.name),
                    allow_drop=allow_drop,
                    dry_run=dry_run,
                )
            else:
                result = await self.add_or_pass(table, dry_run=dry_run)
            results.append(result)
        return results
