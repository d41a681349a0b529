"""Auction circuits: comparison, reduction strategies, auction orchestration."""

from circuits.comparison import ComparisonCircuit
from circuits.reduction import Reducer, FoldReducer, TreeReducer, ColumnReducer, REDUCERS
from circuits.auction import AuctionCircuit, AuctionState
