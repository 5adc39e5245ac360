"""cteql query layer: single-statement builders and composite queries."""
from cteql.query.builder import QueryBuilder
from cteql.query.composite import CompositeQuery, RecursiveSubQuery
from cteql.query.join import JoinInfo, JoinType, join_onto_cte
from cteql.query.parameters import ParameterSequence, ParameterType

__all__ = [
    "QueryBuilder",
    "CompositeQuery",
    "RecursiveSubQuery",
    "JoinInfo",
    "JoinType",
    "join_onto_cte",
    "ParameterSequence",
    "ParameterType",
]
