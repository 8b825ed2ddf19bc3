import os
from setuptools import setup, find_packages
from setuptools.command.build_py import build_py as _build

CLASSIFIERS = [
    'Operating System :: POSIX',
    'Operating System :: MacOS :: MacOS X',
    'Intended Audience :: Developers',
    'Programming Language :: Python',
    'Programming Language :: Python :: 3',
    'Topic :: Internet :: WWW/HTTP',
    'Topic :: System :: Filesystems'
]

def get_version():
    out = "0.0.dev0"
    pkgdir = os.environ.get('PACKAGE_DIR', os.path.dirname(os.path.abspath(__file__)))
    versfile = os.path.join(pkgdir, 'VERSION')
    if os.path.exists(versfile):
        with open(versfile) as fd:
            parts = fd.readline().split()
        if len(parts) > 0:
            out = parts[-1]
    return out

def write_version_mod(version):
    versmodf = os.path.join('python', 'occlient', "version.py")
    with open(versmodf, 'w') as fd:
        fd.write('"""')
        fd.write("""
An identification of the library version.  Note that this module file gets
(over-) written by the build process.
""")
        fd.write('"""\n\n')
        fd.write('__version__ = "')
        fd.write(version)
        fd.write('"\n')

class build(_build):

    def run(self):
        write_version_mod(get_version())
        _build.run(self)

setup(name='occlient',
      version=get_version(),
      description="occlient: a python client for the OCS and WebDAV APIs of ownCloud servers",
      python_requires='>=3.7',
      package_dir={'': 'python'},
      packages=find_packages(where='python', include=['occlient', 'occlient.*']),
      install_requires=[
          'requests',
          'lxml',
          'webdavclient3',
          'PyYAML'
      ],
      extras_require={
          'test': [ 'pytest' ]
      },
      cmdclass={'build_py': build},
      classifiers=CLASSIFIERS,
      zip_safe=False
)
