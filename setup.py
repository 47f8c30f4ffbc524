from setuptools import setup

def get_version():
    from os.path import dirname, join
    for line in open (join (dirname (__file__), 'gifplay.py')):
        if '__version__' in line:
            return line.split("'")[1]

setup(
    name             = 'gifplay',
    version          = get_version (),
    author           = 'Robert Ancell',
    author_email     = 'robert.ancell@ubuntu.com',
    description      = 'Pure Python animated GIF decoder and frame compositor',
    license          = 'LGPL-3',
    url              = 'https://github.com/robert-ancell/pygif',
    py_modules       = [ 'gifplay' ],
    python_requires  = '>=3.9',
    install_requires = [ 'Pillow' ],
    extras_require   = { 'test': [ 'pytest>=7', 'Pillow' ] },
    classifiers      = [ 'Topic :: Multimedia :: Graphics',
                         'Topic :: Software Development :: Libraries :: Python Modules',
                         'Programming Language :: Python',
                         'Programming Language :: Python :: 3',
                         'License :: OSI Approved :: GNU Lesser General Public License v3 (LGPLv3)',
                         'Operating System :: OS Independent' ] )
