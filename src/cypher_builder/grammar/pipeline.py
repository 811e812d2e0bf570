"""Composable pipeline of grammar passes."""

from cypher_builder.grammar.clauses import CompiledQuery
from cypher_builder.grammar.partials import (
    CallGrammar,
    CreateGrammar,
    DeleteGrammar,
    MatchGrammar,
    MergeGrammar,
    RemoveGrammar,
    ReturnGrammar,
    SetGrammar,
    UnionGrammar,
    WhereGrammar,
    WithAllGrammar,
)
from cypher_builder.interfaces import PartialGrammar
from cypher_builder.structure import QueryStructure


class GrammarPipeline:
    """Ordered list of passes.

    ``with_*`` methods return a new pipeline with one more pass appended,
    so compositions can be shared and extended freely.

    Example:
        ```python
        pipeline = GrammarPipeline().with_match_grammar().with_return_grammar()
        text = pipeline.pipe(structure).to_text()
        ```
    """

    def __init__(self, grammars: tuple[PartialGrammar, ...] = ()) -> None:
        self._grammars = grammars

    def _with(self, grammar: PartialGrammar) -> "GrammarPipeline":
        return GrammarPipeline((*self._grammars, grammar))

    def with_match_grammar(self, strict: bool = False) -> "GrammarPipeline":
        return self._with(MatchGrammar(strict))

    def with_with_all_grammar(self) -> "GrammarPipeline":
        return self._with(WithAllGrammar())

    def with_call_grammar(self) -> "GrammarPipeline":
        return self._with(CallGrammar(GrammarPipeline.sub_query))

    def with_where_grammar(self) -> "GrammarPipeline":
        return self._with(WhereGrammar(GrammarPipeline.predicate))

    def with_create_grammar(self) -> "GrammarPipeline":
        return self._with(CreateGrammar())

    def with_merge_grammar(self) -> "GrammarPipeline":
        return self._with(MergeGrammar())

    def with_set_grammar(self) -> "GrammarPipeline":
        return self._with(SetGrammar())

    def with_remove_grammar(self) -> "GrammarPipeline":
        return self._with(RemoveGrammar())

    def with_delete_grammar(self) -> "GrammarPipeline":
        return self._with(DeleteGrammar())

    def with_return_grammar(self) -> "GrammarPipeline":
        return self._with(ReturnGrammar())

    def with_union_grammar(self) -> "GrammarPipeline":
        return self._with(UnionGrammar(GrammarPipeline.all))

    def pipe(self, structure: QueryStructure) -> CompiledQuery:
        """Run every pass over ``structure`` and concatenate their clauses."""
        query = CompiledQuery()
        for grammar in self._grammars:
            query.clauses.extend(list(grammar.compile(structure)))
        return query

    def __len__(self) -> int:
        return len(self._grammars)

    # Named compositions

    @staticmethod
    def all() -> "GrammarPipeline":
        """Every clause kind, in canonical order."""
        return (
            GrammarPipeline()
            .with_match_grammar()
            .with_call_grammar()
            .with_where_grammar()
            .with_merge_grammar()
            .with_create_grammar()
            .with_set_grammar()
            .with_remove_grammar()
            .with_delete_grammar()
            .with_return_grammar()
            .with_union_grammar()
        )

    @staticmethod
    def sub_query() -> "GrammarPipeline":
        """Body of a ``CALL { ... }``."""
        return (
            GrammarPipeline()
            .with_with_all_grammar()
            .with_match_grammar()
            .with_call_grammar()
            .with_where_grammar()
            .with_return_grammar()
        )

    @staticmethod
    def predicate() -> "GrammarPipeline":
        """Body of ``EXISTS { ... }`` and ``COUNT { ... }``."""
        return GrammarPipeline().with_match_grammar().with_call_grammar().with_where_grammar().with_return_grammar()
