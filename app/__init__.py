"""StreamShelf catalog and watch-list application package."""
