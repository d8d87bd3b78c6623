# Sphinx configuration file

import os
import sys
sys.path.insert(0, os.path.abspath('../src'))

from taskwright import __version__  # noqa: E402

project = 'Taskwright'
copyright = '2024, Taskwright contributors'
author = 'Taskwright contributors'
release = __version__

extensions = [
    'sphinx.ext.autodoc',
    'sphinx.ext.napoleon',
    'sphinx.ext.viewcode',
    'sphinx.ext.intersphinx',
    'sphinx_autodoc_typehints',
]

exclude_patterns = ['_build', 'Thumbs.db', '.DS_Store']

html_theme = 'sphinx_rtd_theme'

# Autodoc settings
# Error classes are documented through their place in the TaskRunnerError
# hierarchy; pydantic models hide the generated model_* attributes.
autodoc_default_options = {
    'members': True,
    'member-order': 'bysource',
    'show-inheritance': True,
    'exclude-members': '__weakref__, model_config, model_fields, model_computed_fields',
}
autodoc_typehints = 'description'

# Napoleon settings
napoleon_google_docstring = True
napoleon_numpy_docstring = False

# Intersphinx mapping
intersphinx_mapping = {
    'python': ('https://docs.python.org/3', None),
    'pydantic': ('https://docs.pydantic.dev/latest', None),
}
