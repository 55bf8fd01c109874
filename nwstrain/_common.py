import numpy as np
import time


def get_loce(kconec, ncom=2):
    # kconec : conec table of the element(s), shape (nnel,) or (nelem, nnel)
    # ncom : number of displacement components per node
    #
    # dof numbering is node-major: dof = node * ncom + component
    kconec = np.asarray(kconec, dtype=int)
    kloce = kconec[..., :, None] * ncom + np.arange(ncom)
    return kloce.reshape(kconec.shape[:-1] + (-1,))


def get_free_dofs(ndof, fixed_dofs):
    mask = np.ones(ndof, dtype=bool)
    mask[fixed_dofs] = False
    return np.where(mask)[0]


##################### tic() toc() functions #############

def TicTocGenerator():
    # Generator that returns time differences
    ti = 0           # initial time
    tf = time.time() # final time
    while True:
        ti = tf
        tf = time.time()
        yield tf-ti # returns the time difference

TicToc = TicTocGenerator() # create an instance of the TicTocGen generator

def toc(tempBool=True):
    # Returns the time difference yielded by generator instance TicToc
    tempTimeInterval = next(TicToc)
    if tempBool:
        print( "Elapsed time: %f seconds.\n" %tempTimeInterval )
    return tempTimeInterval

def tic():
    # Records a time in TicToc, marks the beginning of a time interval
    toc(False)
