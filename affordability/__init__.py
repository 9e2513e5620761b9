"""Mortgage affordability engine: rate pricing, DTI policy, mortgage insurance
and the affordability solver, plus what-if scenarios built on top of them."""
