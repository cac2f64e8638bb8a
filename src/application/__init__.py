"""Application layer - Sync orchestration and analytics services.

The application layer orchestrates domain entities and infrastructure ports
but contains no provider protocol details.

Structure:
- services/sync_orchestrator.py: Account/transaction sync, balance aggregation
- services/forecast_engine.py: Income and expense projections
- services/budget_manager.py: Budget spending and alerts
- services/transaction_analyzer.py: Categorization and aggregates
"""
