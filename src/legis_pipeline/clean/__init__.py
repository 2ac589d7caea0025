"""Title filtering for the pipeline.

Provides the exclusion-pattern compiler and the partition-wise filter that
separates routine documents from substantive ones, plus row validation
against the Pydantic table models.
"""
